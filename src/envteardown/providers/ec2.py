"""EC2 checks and key pair deletion."""

from typing import List

from botocore.exceptions import ClientError

from envteardown.teardown.base import KeyPairDeleter, NetworkSafetyChecker
from envteardown.utils.aws_client import AWSClientManager
from envteardown.utils.errors import ErrorContext, UnsafeDeleteError, error_handler
from envteardown.utils.logging import get_logger

logger = get_logger(__name__)

# Instances the stack or the director deployment owns themselves.
IGNORED_INSTANCE_NAMES = ("NAT", "bosh/0")


def _instance_name(instance: dict) -> str:
    for tag in instance.get("Tags", []):
        if tag.get("Key") == "Name":
            return tag.get("Value", "")
    return ""


class VPCStatusChecker(NetworkSafetyChecker):
    """Refuses deletion while instances other than the stack's own are running in the VPC."""

    def __init__(self, client_manager: AWSClientManager):
        self.client_manager = client_manager

    def validate_safe_to_delete(self, identifier: str) -> None:
        """
        Raises:
            UnsafeDeleteError: if the VPC still hosts other instances
        """
        if not identifier:
            logger.debug("Stack has no VPC output, nothing to check")
            return

        ec2 = self.client_manager.get_client("ec2")
        remaining: List[str] = []
        try:
            paginator = ec2.get_paginator("describe_instances")
            pages = paginator.paginate(Filters=[
                {"Name": "vpc-id", "Values": [identifier]},
                {"Name": "instance-state-name", "Values": ["pending", "running", "stopping", "stopped"]},
            ])
            for page in pages:
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        name = _instance_name(instance)
                        if name in IGNORED_INSTANCE_NAMES:
                            continue
                        remaining.append(name or "unnamed")
        except ClientError as e:
            raise error_handler.handle_exception(
                e,
                ErrorContext(resource_id=identifier, resource_type="vpc",
                             aws_service="ec2", aws_operation="describe_instances"),
            ) from e

        if remaining:
            raise UnsafeDeleteError(
                f"vpc {identifier} is not safe to delete; vms still exist: [{', '.join(sorted(remaining))}]",
                suggestions=["Delete the remaining deployments with bosh before destroying the environment"],
            )


class EC2KeyPairDeleter(KeyPairDeleter):
    """Deletes an EC2 key pair by name; an unknown key pair counts as deleted."""

    def __init__(self, client_manager: AWSClientManager):
        self.client_manager = client_manager

    def delete(self, identifier: str) -> None:
        if not identifier:
            logger.debug("No key pair recorded, nothing to delete")
            return

        ec2 = self.client_manager.get_client("ec2")
        try:
            ec2.delete_key_pair(KeyName=identifier)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "InvalidKeyPair.NotFound":
                logger.info(f"Key pair {identifier} already deleted")
                return
            raise error_handler.handle_exception(
                e,
                ErrorContext(resource_id=identifier, resource_type="key_pair",
                             aws_service="ec2", aws_operation="delete_key_pair"),
            ) from e

        logger.info(f"Deleted key pair {identifier}")
