"""Terraform command line wrapper."""

import json
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from envteardown.teardown.base import TerraformDestroyError, TerraformExecutor
from envteardown.utils.commands import CommandRunner
from envteardown.utils.errors import CommandError
from envteardown.utils.logging import get_logger

from .version import parse_version

logger = get_logger(__name__)

TEMPLATE_FILENAME = "template.tf"
STATE_FILENAME = "terraform.tfstate"
CREDENTIALS_FILENAME = "credentials.json"


class TerraformCLI(TerraformExecutor):
    """Runs the ``terraform`` binary in a scratch directory per invocation."""

    def __init__(self, binary: str = "terraform", runner: Optional[CommandRunner] = None):
        """
        Initialize TerraformCLI.

        Args:
            binary: Path or name of the terraform executable
            runner: Command runner; a default one is created if not given
        """
        self.binary = binary
        self.runner = runner or CommandRunner(env={"TF_INPUT": "0"})

    def version(self) -> str:
        """Return the installed version, e.g. ``"0.8.7"``."""
        result = self.runner.run([self.binary, "version"])
        first_line = result.stdout.strip().splitlines()[0] if result.stdout.strip() else ""
        try:
            major, minor, patch = parse_version(first_line)
        except ValueError:
            raise CommandError(f"could not determine terraform version from: {first_line!r}")
        return f"{major}.{minor}.{patch}"

    def destroy(
        self,
        credentials: str,
        env_id: str,
        project_id: str,
        zone: str,
        region: str,
        tf_state: str,
        template: str,
    ) -> str:
        """
        Destroy everything recorded in ``tf_state``.

        Returns:
            The Terraform state after the destroy

        Raises:
            TerraformDestroyError: terraform failed; carries the state it wrote
        """
        with tempfile.TemporaryDirectory(prefix="envteardown-terraform-") as workdir:
            work = Path(workdir)
            (work / TEMPLATE_FILENAME).write_text(template)
            (work / CREDENTIALS_FILENAME).write_text(credentials)
            if tf_state:
                (work / STATE_FILENAME).write_text(tf_state)

            variables = {
                "project_id": project_id,
                "env_id": env_id,
                "region": region,
                "zone": zone,
                "credentials": str(work / CREDENTIALS_FILENAME),
            }

            try:
                self.runner.run([self.binary, "init", "-input=false"], cwd=work)
                self.runner.run(
                    [self.binary, "destroy", "-auto-approve", f"-state={STATE_FILENAME}"]
                    + self._var_args(variables),
                    cwd=work,
                )
            except CommandError as e:
                partial_state = self._read_state(work, fallback=tf_state)
                raise TerraformDestroyError(partial_state, e) from e

            logger.info(f"terraform destroy completed for {env_id}")
            return self._read_state(work, fallback="")

    def outputs(self, tf_state: str) -> Dict[str, str]:
        """Return the outputs recorded in ``tf_state`` as plain strings."""
        if not tf_state:
            return {}

        with tempfile.TemporaryDirectory(prefix="envteardown-terraform-") as workdir:
            work = Path(workdir)
            (work / STATE_FILENAME).write_text(tf_state)
            result = self.runner.run(
                [self.binary, "output", "-json", f"-state={STATE_FILENAME}"],
                cwd=work,
            )

        try:
            raw = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as e:
            raise CommandError(f"terraform output returned invalid JSON: {e}", cause=e)

        return {
            name: "" if entry.get("value") is None else str(entry.get("value"))
            for name, entry in raw.items()
        }

    @staticmethod
    def _var_args(variables: Dict[str, str]) -> List[str]:
        args = []
        for name, value in variables.items():
            args.extend(["-var", f"{name}={value}"])
        return args

    @staticmethod
    def _read_state(work: Path, fallback: str) -> str:
        state_file = work / STATE_FILENAME
        if not state_file.exists():
            return fallback
        return state_file.read_text()
