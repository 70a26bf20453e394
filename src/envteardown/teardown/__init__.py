"""Teardown core: guard stage, director step and provider strategies."""

from .aws import AWSTeardown, StackTeardown
from .base import (
    BOSHDeleteError,
    Stack,
    StackNotFound,
    TerraformDestroyError,
    TerraformOutputs,
)
from .destroy import Destroy, DestroyResult, DestroyStatus
from .director import DirectorTeardown
from .gcp import GCPTeardown
from .guard import DestroyFlags, Guard, TerraformVersionError, parse_flags

__all__ = [
    "AWSTeardown",
    "BOSHDeleteError",
    "Destroy",
    "DestroyFlags",
    "DestroyResult",
    "DestroyStatus",
    "DirectorTeardown",
    "GCPTeardown",
    "Guard",
    "Stack",
    "StackNotFound",
    "StackTeardown",
    "TerraformDestroyError",
    "TerraformOutputs",
    "TerraformVersionError",
    "parse_flags",
]
