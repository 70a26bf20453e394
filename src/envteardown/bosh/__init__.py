"""BOSH director adapter."""

from .manager import BOSHCLI

__all__ = ["BOSHCLI"]
