"""Pre-flight validation of the loaded state."""

from envteardown.utils.errors import StateError

from .manager import STATE_FILENAME, StateManager
from .models import STATE_VERSION, State


class StateFileValidator:
    """Checks that a state file exists and is one this tool can tear down."""

    def __init__(self, state_manager: StateManager):
        self.state_manager = state_manager

    def validate(self, state: State) -> None:
        """
        Validate the state about to be destroyed.

        Raises:
            StateError: If the state file is missing or from an unsupported
                version
        """
        if not self.state_manager.exists():
            raise StateError(
                f"{STATE_FILENAME} not found in {self.state_manager.state_dir}, "
                "ensure you're running this command in the proper state directory",
                suggestions=["Pass --state-dir pointing at the environment's state directory"],
            )

        if state.version != STATE_VERSION:
            raise StateError(
                f"state version {state.version} is not supported, expected {STATE_VERSION}"
            )
