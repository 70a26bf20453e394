"""Resumable teardown of bootstrapped BOSH environments."""

__version__ = "0.1.0"
