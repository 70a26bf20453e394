"""BOSH director teardown step."""

from envteardown.state.checkpoint import CheckpointWriter
from envteardown.state.models import BOSHState, State
from envteardown.utils.errors import AggregateError
from envteardown.utils.logging import get_logger

from .base import BOSHDeleteError, BOSHManager, Reporter

logger = get_logger(__name__)


class DirectorTeardown:
    """Deletes the director recorded in the state, if any."""

    def __init__(self, bosh_manager: BOSHManager, checkpoints: CheckpointWriter, reporter: Reporter):
        self.bosh_manager = bosh_manager
        self.checkpoints = checkpoints
        self.reporter = reporter

    def run(self, state: State) -> State:
        """
        Delete the director and clear ``state.bosh``.

        On a BOSHDeleteError the director section is replaced by the state the
        deletion left behind and that is checkpointed before the error is
        raised again. Any other failure leaves the state untouched.

        Raises:
            BOSHDeleteError: deletion failed (state checkpointed)
            AggregateError: deletion failed and so did the checkpoint
        """
        if state.bosh.is_empty():
            self.reporter.note("no BOSH director, skipping...")
            return state

        self.reporter.step("destroying bosh director")
        logger.info(f"Deleting BOSH director {state.bosh.director_name or '(unnamed)'}")

        try:
            self.bosh_manager.delete(state)
        except BOSHDeleteError as delete_error:
            logger.warning(f"Director deletion failed, saving partial director state: {delete_error}")
            state.bosh = delete_error.state.bosh.model_copy(deep=True)
            try:
                self.checkpoints.checkpoint(state, "partial director deletion")
            except Exception as save_error:
                raise AggregateError([delete_error, save_error]) from delete_error
            raise

        state.bosh = BOSHState()
        self.checkpoints.checkpoint(state, "director deletion")
        return state
