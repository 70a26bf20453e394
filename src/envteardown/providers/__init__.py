"""AWS and GCP adapters for the teardown core."""

from .cloudformation import CloudFormationInfrastructureManager, CloudFormationStackManager
from .credentials import ProviderCredentialValidator
from .ec2 import EC2KeyPairDeleter, VPCStatusChecker
from .gcp import GCloudClient, GCPKeyPairDeleter, NetworkInstancesChecker
from .iam import IAMCertificateDeleter

__all__ = [
    "CloudFormationInfrastructureManager",
    "CloudFormationStackManager",
    "EC2KeyPairDeleter",
    "GCloudClient",
    "GCPKeyPairDeleter",
    "IAMCertificateDeleter",
    "NetworkInstancesChecker",
    "ProviderCredentialValidator",
    "VPCStatusChecker",
]
