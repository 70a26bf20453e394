"""Shared pytest fixtures."""

import pytest

from fakes import Fakes, aws_state, gcp_state


@pytest.fixture
def fakes():
    """Collaborator fakes that answer the confirmation prompt with "yes"."""
    return Fakes()


@pytest.fixture
def destroy(fakes):
    return fakes.build()


@pytest.fixture
def aws():
    return aws_state()


@pytest.fixture
def gcp():
    return gcp_state()
