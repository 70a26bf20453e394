"""Subprocess wrapper shared by the terraform, bosh and gcloud adapters."""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from envteardown.utils.errors import CommandError
from envteardown.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ExecutionResult:
    """Result of a command execution."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: str = ""

    @property
    def is_success(self) -> bool:
        """Check if execution succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if execution failed."""
        return self.returncode != 0

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return f"{self.stdout}\n{self.stderr}".strip()


class CommandRunner:
    """Runs external commands and captures their output."""

    def __init__(self, env: Optional[Dict[str, str]] = None):
        """
        Initialize the runner.

        Args:
            env: Extra environment variables merged into every invocation
        """
        self.env = env

    def run(
        self,
        args: List[str],
        cwd: Optional[Union[str, Path]] = None,
        check: bool = True,
        env: Optional[Dict[str, str]] = None,
    ) -> ExecutionResult:
        """
        Run a command.

        Args:
            args: Program and arguments
            cwd: Working directory
            check: Raise CommandError when the command exits non-zero
            env: Extra environment variables for this invocation only

        Returns:
            ExecutionResult

        Raises:
            CommandError: If the program cannot be started, or exits non-zero
                and check=True
        """
        cmd_string = " ".join(args)
        logger.debug(f"Running: {cmd_string}")

        merged_env = None
        if self.env or env:
            merged_env = dict(os.environ)
            merged_env.update(self.env or {})
            merged_env.update(env or {})

        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
                env=merged_env,
            )
        except OSError as e:
            raise CommandError(f"failed to run {args[0]}: {e}", cause=e)

        result = ExecutionResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            command=cmd_string,
        )

        if check and result.is_failure:
            raise CommandError(
                f"{args[0]} exited with status {result.returncode}: {result.stderr.strip()}"
            )

        return result
