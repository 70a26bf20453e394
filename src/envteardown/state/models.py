"""State file data models."""

from enum import Enum
from typing import Any, Dict
from pydantic import BaseModel, ConfigDict, Field


STATE_VERSION = 3


class IAAS(str, Enum):
    """Infrastructure provider an environment was created on."""

    UNSET = ""
    AWS = "aws"
    GCP = "gcp"


class _StateSection(BaseModel):
    """Base for state sections; assignment is validated and unknown keys rejected."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    def is_empty(self) -> bool:
        """Check whether every field still holds its default value."""
        return self == type(self)()


class AWSState(_StateSection):
    """AWS credentials recorded at environment creation."""

    access_key_id: str = Field("", description="AWS access key ID")
    secret_access_key: str = Field("", description="AWS secret access key")
    region: str = Field("", description="AWS region")


class GCPState(_StateSection):
    """GCP credentials and placement recorded at environment creation."""

    service_account_key: str = Field("", description="Service account key JSON")
    project_id: str = Field("", description="GCP project ID")
    zone: str = Field("", description="GCP zone")
    region: str = Field("", description="GCP region")


class KeyPair(_StateSection):
    """SSH key pair used by the director and its VMs."""

    name: str = Field("", description="EC2 key pair name (AWS only)")
    private_key: str = Field("", description="PEM encoded private key")
    public_key: str = Field("", description="OpenSSH public key")


class BOSHState(_StateSection):
    """Everything needed to tear down the BOSH director."""

    director_name: str = ""
    director_username: str = ""
    director_password: str = ""
    director_address: str = ""
    director_ssl_certificate: str = ""
    director_ssl_private_key: str = ""
    credentials: Dict[str, Any] = Field(
        default_factory=dict, description="Vars-store credentials for the director"
    )
    state: Dict[str, Any] = Field(
        default_factory=dict, description="bosh create-env state file contents"
    )
    manifest: str = Field("", description="Director manifest used by create-env")


class StackState(_StateSection):
    """CloudFormation stack and its load balancer certificate (AWS only)."""

    name: str = Field("", description="CloudFormation stack name")
    lb_type: str = Field("", description="Load balancer type (none, concourse, cf)")
    certificate_name: str = Field("", description="IAM server certificate name")


class State(_StateSection):
    """Represents everything an environment's bootstrap created."""

    version: int = Field(STATE_VERSION, description="State file format version")
    iaas: IAAS = Field(IAAS.UNSET, description="Infrastructure provider")
    env_id: str = Field("", description="Environment name")
    aws: AWSState = Field(default_factory=AWSState)
    gcp: GCPState = Field(default_factory=GCPState)
    key_pair: KeyPair = Field(default_factory=KeyPair)
    bosh: BOSHState = Field(default_factory=BOSHState)
    stack: StackState = Field(default_factory=StackState)
    tf_state: str = Field("", description="Serialized Terraform state")

    def is_empty(self) -> bool:
        """Check whether the state records nothing at all (version aside)."""
        return self.model_dump(exclude={"version"}) == State().model_dump(exclude={"version"})

    def snapshot(self) -> "State":
        """Return an independent deep copy of this state."""
        return self.model_copy(deep=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "State":
        """Create State from dictionary."""
        return cls.model_validate(data)
