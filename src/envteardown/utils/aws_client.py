"""AWS client management and session handling."""

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, NoCredentialsError, PartialCredentialsError
from typing import Optional, Dict, Any
from dataclasses import dataclass
from envteardown.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AWSIdentity:
    """Caller identity returned by STS."""
    account_id: str
    user_arn: str
    user_id: str
    region: str


class AWSClientManager:
    """Manages a boto3 session and its clients.

    Credentials come from the environment's state file when present; otherwise
    boto3's default chain (or ``profile``) is used.
    """

    def __init__(
        self,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        region: Optional[str] = None,
        profile: Optional[str] = None,
        max_pool_connections: int = 10
    ):
        """Initialize AWS client manager.

        Args:
            access_key_id: Static access key ID
            secret_access_key: Static secret access key
            region: AWS region to use
            profile: AWS profile name, used when no static keys are given
            max_pool_connections: Maximum number of connections in the connection pool
        """
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.region = region
        self.profile = profile
        self._session: Optional[boto3.Session] = None
        self._clients: Dict[str, Any] = {}
        self._identity: Optional[AWSIdentity] = None

        # Each collaborator call is a single attempt from the teardown's point of
        # view; botocore's standard mode still absorbs throttling.
        self._boto_config = Config(
            max_pool_connections=max_pool_connections,
            retries={
                'mode': 'standard',
                'max_attempts': 3
            },
            connect_timeout=10,
            read_timeout=60
        )

    @property
    def session(self) -> boto3.Session:
        """Get or create boto3 session.

        Returns:
            Configured boto3 session
        """
        if self._session is None:
            kwargs = {}
            if self.access_key_id and self.secret_access_key:
                kwargs['aws_access_key_id'] = self.access_key_id
                kwargs['aws_secret_access_key'] = self.secret_access_key
                source = 'state file'
            else:
                if self.profile:
                    kwargs['profile_name'] = self.profile
                source = self.profile or 'default'
            if self.region:
                kwargs['region_name'] = self.region

            self._session = boto3.Session(**kwargs)
            logger.info(f"Created AWS session - Region: {self._session.region_name}, "
                        f"Credentials: {source}")

        return self._session

    def get_client(self, service_name: str):
        """Get boto3 client for a service.

        Args:
            service_name: AWS service name (e.g., 'ec2', 'cloudformation')

        Returns:
            Boto3 client for the service
        """
        if service_name in self._clients:
            return self._clients[service_name]

        client = self.session.client(service_name, config=self._boto_config)
        self._clients[service_name] = client

        logger.debug(f"Created {service_name} client")

        return client

    def validate_credentials(self) -> AWSIdentity:
        """Validate AWS credentials and return the caller identity.

        Returns:
            AWSIdentity with account and user information

        Raises:
            NoCredentialsError: If no credentials are found
            PartialCredentialsError: If credentials are incomplete
            ClientError: If credentials are invalid
        """
        if self._identity is not None:
            return self._identity

        try:
            sts = self.get_client('sts')
            identity = sts.get_caller_identity()

            self._identity = AWSIdentity(
                account_id=identity['Account'],
                user_arn=identity['Arn'],
                user_id=identity['UserId'],
                region=self.session.region_name
            )

            logger.info(f"AWS credentials validated - Account: {self._identity.account_id}, "
                        f"User: {self._identity.user_arn}, Region: {self._identity.region}")

            return self._identity

        except (NoCredentialsError, PartialCredentialsError) as e:
            logger.error(f"AWS credentials missing or incomplete: {e}")
            raise
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            if error_code == 'InvalidClientTokenId':
                logger.error("AWS credentials are invalid or expired")
            elif error_code == 'SignatureDoesNotMatch':
                logger.error("AWS credential signature is invalid")
            else:
                logger.error(f"Failed to validate AWS credentials: {e}")
            raise

    def clear_cache(self):
        """Clear cached clients and sessions."""
        self._clients.clear()
        self._session = None
        self._identity = None
        logger.debug("Cleared AWS client cache")
