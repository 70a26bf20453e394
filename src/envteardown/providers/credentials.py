"""Credential checks run before any AWS or GCP resource is touched."""

import json
from typing import Callable, Optional

from envteardown.state.models import AWSState, GCPState
from envteardown.teardown.base import CredentialValidator
from envteardown.utils.aws_client import AWSClientManager
from envteardown.utils.errors import CredentialError, ErrorContext, error_handler
from envteardown.utils.logging import get_logger

logger = get_logger(__name__)


class ProviderCredentialValidator(CredentialValidator):
    """Checks the credentials recorded in the state file.

    AWS keys are verified against STS; GCP keys are only checked for shape
    since gcloud reports authentication failures on first use anyway.
    """

    def __init__(self, client_manager_factory: Optional[Callable[..., AWSClientManager]] = None):
        self.client_manager_factory = client_manager_factory or AWSClientManager

    def validate_aws(self, credentials: AWSState) -> None:
        """
        Validate AWS credentials.

        Raises:
            CredentialError: if a field is missing or STS rejects the keys
        """
        if not credentials.access_key_id:
            raise CredentialError("AWS access key ID must be provided")
        if not credentials.secret_access_key:
            raise CredentialError("AWS secret access key must be provided")
        if not credentials.region:
            raise CredentialError("AWS region must be provided")

        client_manager = self.client_manager_factory(
            access_key_id=credentials.access_key_id,
            secret_access_key=credentials.secret_access_key,
            region=credentials.region,
        )
        try:
            identity = client_manager.validate_credentials()
        except Exception as e:
            raise error_handler.handle_exception(
                e, ErrorContext(aws_service="sts", aws_operation="get_caller_identity")
            ) from e

        logger.info(f"Using AWS account {identity.account_id}")

    def validate_gcp(self, credentials: GCPState) -> None:
        """
        Validate GCP credentials.

        Raises:
            CredentialError: if a field is missing or the key is not JSON
        """
        if not credentials.service_account_key:
            raise CredentialError("GCP service account key must be provided")
        if not credentials.project_id:
            raise CredentialError("GCP project ID must be provided")
        if not credentials.zone:
            raise CredentialError("GCP zone must be provided")
        if not credentials.region:
            raise CredentialError("GCP region must be provided")

        try:
            key = json.loads(credentials.service_account_key)
        except json.JSONDecodeError as e:
            raise CredentialError(
                f"GCP service account key must be valid JSON: {e}",
                cause=e,
                suggestions=["Re-create the environment's service account key"],
            )
        if not isinstance(key, dict):
            raise CredentialError("GCP service account key must be a JSON object")

        logger.debug(f"GCP service account {key.get('client_email', '(unknown)')} for {credentials.project_id}")
