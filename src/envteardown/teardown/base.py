"""Collaborator interfaces consumed by the teardown core.

Every collaborator signals failure by raising; the core propagates those
exceptions untouched unless stated otherwise.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict

from envteardown.state.models import AWSState, GCPState, State
from envteardown.utils.errors import ErrorCategory, TeardownError


class Reporter(ABC):
    """User-facing output and confirmation."""

    @abstractmethod
    def prompt(self, message: str) -> str:
        """Show ``message`` and return the user's answer."""

    @abstractmethod
    def step(self, message: str) -> None:
        """Announce a step that is about to run."""

    @abstractmethod
    def note(self, message: str) -> None:
        """Print an informational line."""


class StateStore(ABC):
    @abstractmethod
    def save(self, state: State) -> None:
        pass


class StateValidator(ABC):
    @abstractmethod
    def validate(self, state: State) -> None:
        pass


class CredentialValidator(ABC):
    @abstractmethod
    def validate_aws(self, credentials: AWSState) -> None:
        pass

    @abstractmethod
    def validate_gcp(self, credentials: GCPState) -> None:
        pass


class BOSHManager(ABC):
    @abstractmethod
    def delete(self, state: State) -> None:
        """Delete the director.

        Raises:
            BOSHDeleteError: when the deletion failed after changing the
                director, carrying the director state as it now stands
        """


class BOSHDeleteError(TeardownError):
    """Director deletion failed; ``state`` holds what was left behind."""

    def __init__(self, state: State, cause: Exception):
        super().__init__(str(cause), category=ErrorCategory.COMMAND, cause=cause)
        self.state = state


@dataclass
class Stack:
    """A described CloudFormation stack."""

    name: str
    status: str = ""
    outputs: Dict[str, str] = field(default_factory=dict)


class StackNotFound(TeardownError):
    """The stack does not exist (any more)."""

    def __init__(self, stack_name: str = ""):
        super().__init__(f"stack not found: {stack_name}" if stack_name else "stack not found")
        self.stack_name = stack_name


class StackManager(ABC):
    @abstractmethod
    def describe(self, stack_name: str) -> Stack:
        """Describe a stack.

        Raises:
            StackNotFound: if the stack does not exist
        """


class InfrastructureManager(ABC):
    @abstractmethod
    def delete(self, stack_name: str) -> None:
        """Delete the stack and wait for the deletion to finish."""


class NetworkSafetyChecker(ABC):
    @abstractmethod
    def validate_safe_to_delete(self, identifier: str) -> None:
        """Raise if workloads still live in the network ``identifier``."""


class CertificateDeleter(ABC):
    @abstractmethod
    def delete(self, certificate_name: str) -> None:
        pass


class KeyPairDeleter(ABC):
    @abstractmethod
    def delete(self, identifier: str) -> None:
        """Delete the key pair; ``identifier`` is the name (AWS) or public key (GCP)."""


@dataclass
class TerraformOutputs:
    """Live identifiers read from the Terraform state."""

    external_ip: str = ""
    network_name: str = ""
    subnetwork_name: str = ""
    bosh_tag: str = ""
    internal_tag: str = ""
    director_address: str = ""


class TerraformDestroyError(TeardownError):
    """``terraform destroy`` failed; ``tf_state`` is the state it left behind."""

    def __init__(self, tf_state: str, cause: Exception):
        super().__init__(str(cause), category=ErrorCategory.COMMAND, cause=cause)
        self.tf_state = tf_state


class TerraformExecutor(ABC):
    @abstractmethod
    def version(self) -> str:
        pass

    @abstractmethod
    def destroy(
        self,
        credentials: str,
        env_id: str,
        project_id: str,
        zone: str,
        region: str,
        tf_state: str,
        template: str,
    ) -> str:
        """Destroy everything in ``tf_state`` and return the resulting state.

        Raises:
            TerraformDestroyError: on failure, with the partial state
        """


class TerraformOutputProvider(ABC):
    @abstractmethod
    def get(self, state: State) -> TerraformOutputs:
        pass


class TeardownStrategy(ABC):
    """Provider-specific teardown run after the director is gone."""

    @abstractmethod
    def run(self, state: State) -> State:
        """Tear down the provider resources recorded in ``state``.

        Mutates ``state`` in place, checkpointing after each confirmed
        deletion, and returns it.
        """
