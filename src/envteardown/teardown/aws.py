"""AWS teardown: CloudFormation stack, load balancer certificate, EC2 key pair."""

from envteardown.state.checkpoint import CheckpointWriter
from envteardown.state.models import KeyPair, State
from envteardown.utils.logging import get_logger

from .base import (
    CertificateDeleter,
    InfrastructureManager,
    KeyPairDeleter,
    NetworkSafetyChecker,
    Reporter,
    StackManager,
    StackNotFound,
    TeardownStrategy,
)

logger = get_logger(__name__)

VPC_OUTPUT = "VPCID"


class StackTeardown(TeardownStrategy):
    """Deletes the CloudFormation stack and its certificate.

    Also used on its own for states that record no provider, which predate
    the provider field and only ever created a stack.
    """

    def __init__(
        self,
        stack_manager: StackManager,
        infrastructure_manager: InfrastructureManager,
        vpc_status_checker: NetworkSafetyChecker,
        certificate_deleter: CertificateDeleter,
        checkpoints: CheckpointWriter,
        reporter: Reporter,
    ):
        self.stack_manager = stack_manager
        self.infrastructure_manager = infrastructure_manager
        self.vpc_status_checker = vpc_status_checker
        self.certificate_deleter = certificate_deleter
        self.checkpoints = checkpoints
        self.reporter = reporter

    def run(self, state: State) -> State:
        self._delete_stack(state)
        self._delete_certificate(state)
        return state

    def _delete_stack(self, state: State) -> None:
        if not state.stack.name:
            self.reporter.note("no AWS stack, skipping...")
            return

        try:
            stack = self.stack_manager.describe(state.stack.name)
        except StackNotFound:
            logger.info(f"Stack {state.stack.name} no longer exists")
            self.reporter.note("no AWS stack, skipping...")
            return

        self.vpc_status_checker.validate_safe_to_delete(stack.outputs.get(VPC_OUTPUT, ""))

        self.reporter.step("destroying AWS stack")
        self.infrastructure_manager.delete(state.stack.name)

        # The certificate outlives the stack until it is deleted on its own.
        state.stack.name = ""
        state.stack.lb_type = ""
        self.checkpoints.checkpoint(state, "stack deletion")

    def _delete_certificate(self, state: State) -> None:
        if not state.stack.certificate_name:
            return

        self.reporter.step("deleting certificate")
        self.certificate_deleter.delete(state.stack.certificate_name)

        state.stack.certificate_name = ""
        self.checkpoints.checkpoint(state, "certificate deletion")


class AWSTeardown(TeardownStrategy):
    """Stack and certificate teardown followed by the EC2 key pair."""

    def __init__(
        self,
        stack_teardown: StackTeardown,
        key_pair_deleter: KeyPairDeleter,
        checkpoints: CheckpointWriter,
        reporter: Reporter,
    ):
        self.stack_teardown = stack_teardown
        self.key_pair_deleter = key_pair_deleter
        self.checkpoints = checkpoints
        self.reporter = reporter

    def run(self, state: State) -> State:
        self.stack_teardown.run(state)

        # Attempted even without a recorded name; the deleter treats that as done.
        self.reporter.step("deleting keypair")
        self.key_pair_deleter.delete(state.key_pair.name)

        state.key_pair = KeyPair()
        self.checkpoints.checkpoint(state, "key pair deletion")
        return state
