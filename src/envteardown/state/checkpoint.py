"""Checkpointing of teardown progress into the state store."""

from envteardown.utils.logging import get_logger

from .models import State

logger = get_logger(__name__)


class CheckpointWriter:
    """Persists a snapshot of the state after each confirmed deletion.

    A failed save is raised to the caller unchanged; the deletion that
    preceded it is not undone.
    """

    def __init__(self, store):
        """
        Initialize CheckpointWriter.

        Args:
            store: State store with a ``save(state)`` method
        """
        self.store = store
        self.count = 0

    def checkpoint(self, state: State, label: str = "") -> None:
        """
        Save a snapshot of ``state``.

        Args:
            state: Current teardown state
            label: What was just deleted, for the log

        Raises:
            Exception: Whatever the store raised
        """
        try:
            self.store.save(state.snapshot())
        except Exception as e:
            logger.error(f"Failed to save checkpoint{f' after {label}' if label else ''}: {e}")
            raise
        self.count += 1
        logger.debug(f"Checkpoint {self.count} saved{f' after {label}' if label else ''}")
