"""IAM server certificate deletion."""

from botocore.exceptions import ClientError

from envteardown.teardown.base import CertificateDeleter
from envteardown.utils.aws_client import AWSClientManager
from envteardown.utils.errors import ErrorContext, error_handler
from envteardown.utils.logging import get_logger

logger = get_logger(__name__)


class IAMCertificateDeleter(CertificateDeleter):
    """Deletes the load balancer's server certificate."""

    def __init__(self, client_manager: AWSClientManager):
        self.client_manager = client_manager

    def delete(self, certificate_name: str) -> None:
        iam = self.client_manager.get_client("iam")
        try:
            iam.delete_server_certificate(ServerCertificateName=certificate_name)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "NoSuchEntity":
                logger.info(f"Certificate {certificate_name} already deleted")
                return
            raise error_handler.handle_exception(
                e,
                ErrorContext(
                    resource_id=certificate_name,
                    resource_type="server_certificate",
                    aws_service="iam",
                    aws_operation="delete_server_certificate",
                ),
            ) from e

        logger.info(f"Deleted certificate {certificate_name}")
