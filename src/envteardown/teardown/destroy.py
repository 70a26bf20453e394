"""Destroy orchestrator: guard stage, director, then the provider teardown."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Sequence

from envteardown.state.checkpoint import CheckpointWriter
from envteardown.state.models import IAAS, State
from envteardown.utils.errors import ValidationError
from envteardown.utils.logging import LogContext, get_logger

from .aws import AWSTeardown, StackTeardown
from .base import (
    BOSHManager,
    CertificateDeleter,
    CredentialValidator,
    InfrastructureManager,
    KeyPairDeleter,
    NetworkSafetyChecker,
    Reporter,
    StackManager,
    StateStore,
    StateValidator,
    TeardownStrategy,
    TerraformExecutor,
    TerraformOutputProvider,
)
from .director import DirectorTeardown
from .gcp import GCPTeardown
from .guard import Guard, parse_flags

logger = get_logger(__name__)


class DestroyStatus(Enum):
    """How a destroy run ended without raising."""
    COMPLETED = "completed"
    SKIPPED = "skipped"      # no state and --skip-if-missing
    CANCELLED = "cancelled"  # confirmation declined


@dataclass
class DestroyResult:
    """Result of a destroy run that did not raise."""

    status: DestroyStatus
    state: State
    checkpoints: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    duration: float = 0.0  # seconds

    def is_completed(self) -> bool:
        return self.status == DestroyStatus.COMPLETED


class Destroy:
    """Tears down an environment recorded in a state file.

    Order: guard stage, BOSH director, then the strategy registered for
    ``state.iaas``. The state passed to ``execute`` is updated in place and
    checkpointed after every confirmed deletion, so a failed run can simply be
    repeated.
    """

    def __init__(
        self,
        credential_validator: CredentialValidator,
        reporter: Reporter,
        state_store: StateStore,
        state_validator: StateValidator,
        terraform_executor: TerraformExecutor,
        bosh_manager: BOSHManager,
        stack_manager: StackManager,
        infrastructure_manager: InfrastructureManager,
        vpc_status_checker: NetworkSafetyChecker,
        certificate_deleter: CertificateDeleter,
        aws_key_pair_deleter: KeyPairDeleter,
        terraform_output_provider: TerraformOutputProvider,
        network_instances_checker: NetworkSafetyChecker,
        gcp_key_pair_deleter: KeyPairDeleter,
    ):
        self.reporter = reporter
        self.checkpoints = CheckpointWriter(state_store)

        self.guard = Guard(
            state_validator=state_validator,
            terraform_executor=terraform_executor,
            credential_validator=credential_validator,
            reporter=reporter,
        )
        self.director = DirectorTeardown(bosh_manager, self.checkpoints, reporter)

        stack_teardown = StackTeardown(
            stack_manager=stack_manager,
            infrastructure_manager=infrastructure_manager,
            vpc_status_checker=vpc_status_checker,
            certificate_deleter=certificate_deleter,
            checkpoints=self.checkpoints,
            reporter=reporter,
        )
        self.strategies: Dict[IAAS, TeardownStrategy] = {
            IAAS.UNSET: stack_teardown,
            IAAS.AWS: AWSTeardown(
                stack_teardown=stack_teardown,
                key_pair_deleter=aws_key_pair_deleter,
                checkpoints=self.checkpoints,
                reporter=reporter,
            ),
            IAAS.GCP: GCPTeardown(
                terraform_output_provider=terraform_output_provider,
                network_instances_checker=network_instances_checker,
                terraform_executor=terraform_executor,
                key_pair_deleter=gcp_key_pair_deleter,
                checkpoints=self.checkpoints,
                reporter=reporter,
            ),
        }

    def execute(self, flags: Sequence[str], state: State) -> DestroyResult:
        """
        Run destroy.

        Args:
            flags: Command line flags for destroy
            state: State loaded from the state file (empty if there is none)

        Returns:
            DestroyResult; SKIPPED and CANCELLED runs deleted nothing

        Raises:
            TeardownError: (or a collaborator's own exception) on the first
                failure; everything deleted before it is already checkpointed
        """
        start_time = datetime.now()
        started = time.monotonic()
        checkpoints_before = self.checkpoints.count

        def result(status: DestroyStatus) -> DestroyResult:
            return DestroyResult(
                status=status,
                state=state,
                checkpoints=self.checkpoints.count - checkpoints_before,
                start_time=start_time,
                end_time=datetime.now(),
                duration=time.monotonic() - started,
            )

        destroy_flags = parse_flags(flags)

        with LogContext(logger, env_id=state.env_id, iaas=state.iaas.value):
            if self.guard.skip_missing(destroy_flags, state):
                return result(DestroyStatus.SKIPPED)

            self.guard.validate_state(state)

            if not self.guard.confirm(destroy_flags, state):
                return result(DestroyStatus.CANCELLED)

            self.guard.check_terraform_version()
            self.guard.validate_credentials(state)

            strategy = self.strategies.get(state.iaas)
            if strategy is None:
                raise ValidationError(f"unsupported IAAS: {state.iaas.value!r}")

            logger.info(f"Destroying environment {state.env_id or '(unnamed)'}")

            with LogContext(logger, step="director"):
                self.director.run(state)

            with LogContext(logger, step=state.iaas.value or "stack"):
                strategy.run(state)

            logger.info(f"Environment {state.env_id or '(unnamed)'} destroyed")
            return result(DestroyStatus.COMPLETED)
