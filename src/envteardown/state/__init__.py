"""State management module for the environment state file."""

from .checkpoint import CheckpointWriter
from .manager import STATE_FILENAME, StateManager
from .models import (
    IAAS,
    STATE_VERSION,
    AWSState,
    BOSHState,
    GCPState,
    KeyPair,
    StackState,
    State,
)
from .validator import StateFileValidator

__all__ = [
    "IAAS",
    "STATE_VERSION",
    "STATE_FILENAME",
    "AWSState",
    "BOSHState",
    "GCPState",
    "KeyPair",
    "StackState",
    "State",
    "StateManager",
    "StateFileValidator",
    "CheckpointWriter",
]
