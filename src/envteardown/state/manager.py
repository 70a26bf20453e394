"""State manager for loading and saving the environment state file."""

import json
from pathlib import Path
from pydantic import ValidationError

from envteardown.utils.errors import StateError
from envteardown.utils.logging import get_logger

from .models import State

logger = get_logger(__name__)

STATE_FILENAME = "envteardown-state.json"


class StateManager:
    """Reads and writes the state file in a state directory."""

    def __init__(self, state_dir: str):
        """
        Initialize StateManager.

        Args:
            state_dir: Directory holding the state file
        """
        self.state_dir = Path(state_dir)
        self.state_path = self.state_dir / STATE_FILENAME

    def exists(self) -> bool:
        """Check if state file exists."""
        return self.state_path.exists()

    def load(self) -> State:
        """
        Load state from file.

        Returns:
            State object; an empty State when the file does not exist

        Raises:
            StateError: If state file is corrupted or invalid
        """
        if not self.exists():
            logger.debug(f"No state file at {self.state_path}")
            return State()

        try:
            with open(self.state_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StateError(f"Failed to parse state file: {e}", cause=e)
        except OSError as e:
            raise StateError(f"Failed to read state file: {e}", cause=e)

        try:
            state = State.from_dict(data)
        except ValidationError as e:
            raise StateError(f"Invalid state file {self.state_path}: {e}", cause=e)

        return state

    def save(self, state: State) -> None:
        """
        Save state to file.

        An empty state means nothing is left to track, so the file is removed
        instead of written.

        Args:
            state: State object to save

        Raises:
            StateError: If state cannot be saved
        """
        if state.is_empty():
            self._remove()
            return

        self.state_dir.mkdir(parents=True, exist_ok=True)

        try:
            # Write to temporary file first
            temp_path = self.state_path.with_suffix(".tmp")
            with open(temp_path, "w") as f:
                json.dump(state.to_dict(), f, indent=2)

            # Atomic rename
            temp_path.replace(self.state_path)
        except OSError as e:
            raise StateError(f"Failed to save state file: {e}", cause=e)

        logger.debug(f"Saved state to {self.state_path}")

    def _remove(self) -> None:
        """Delete the state file if present."""
        try:
            if self.exists():
                self.state_path.unlink()
                logger.info(f"Removed state file {self.state_path}")
        except OSError as e:
            raise StateError(f"Failed to remove state file: {e}", cause=e)
