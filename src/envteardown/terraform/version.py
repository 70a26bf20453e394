"""Terraform version parsing."""

import re
from typing import Tuple

_VERSION_PATTERN = re.compile(r"v?(\d+)\.(\d+)\.(\d+)")


def parse_version(version: str) -> Tuple[int, int, int]:
    """Parse ``"0.8.7"``, ``"v0.8.7"`` or ``"Terraform v0.8.7"`` into a tuple.

    Raises:
        ValueError: if no version number is found
    """
    match = _VERSION_PATTERN.search(version)
    if not match:
        raise ValueError(f"invalid terraform version: {version!r}")
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch)
