"""Command line interface for envteardown."""
