"""Utility modules for logging, errors, AWS client management and subprocesses."""

from envteardown.utils.aws_client import AWSClientManager, AWSIdentity
from envteardown.utils.commands import CommandRunner, ExecutionResult
from envteardown.utils.errors import (
    ErrorCategory,
    ErrorSeverity,
    ErrorContext,
    TeardownError,
    AggregateError,
    CommandError,
    ConfigurationError,
    CredentialError,
    FlagError,
    ProvisioningError,
    StateError,
    UnsafeDeleteError,
    ValidationError,
    ErrorHandler,
    error_handler
)
from envteardown.utils.logging import get_logger, setup_logging, LogContext

__all__ = [
    # AWS Client
    'AWSClientManager',
    'AWSIdentity',

    # Subprocess
    'CommandRunner',
    'ExecutionResult',

    # Errors
    'ErrorCategory',
    'ErrorSeverity',
    'ErrorContext',
    'TeardownError',
    'AggregateError',
    'CommandError',
    'ConfigurationError',
    'CredentialError',
    'FlagError',
    'ProvisioningError',
    'StateError',
    'UnsafeDeleteError',
    'ValidationError',
    'ErrorHandler',
    'error_handler',

    # Logging
    'get_logger',
    'setup_logging',
    'LogContext',
]
