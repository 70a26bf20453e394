"""BOSH director deletion with ``bosh delete-env``."""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from envteardown.state.models import State
from envteardown.teardown.base import BOSHDeleteError, BOSHManager
from envteardown.utils.commands import CommandRunner
from envteardown.utils.errors import CommandError, StateError
from envteardown.utils.logging import get_logger

logger = get_logger(__name__)

MANIFEST_FILENAME = "bosh.yml"
STATE_FILENAME = "state.json"
VARS_STORE_FILENAME = "variables.yml"


class BOSHCLI(BOSHManager):
    """Deletes a director created with ``bosh create-env``.

    delete-env needs the manifest, its own state file and the vars-store the
    director was created with; all three live in the environment state and are
    written to a scratch directory for the duration of the command.
    """

    def __init__(self, binary: str = "bosh", runner: Optional[CommandRunner] = None):
        self.binary = binary
        self.runner = runner or CommandRunner()

    def delete(self, state: State) -> None:
        """
        Delete the director recorded in ``state.bosh``.

        Raises:
            StateError: if the state holds no director manifest
            BOSHDeleteError: if delete-env failed; carries ``state`` with the
                director state and credentials delete-env left behind
        """
        if not state.bosh.manifest:
            raise StateError(
                "director manifest is missing from the state file",
                suggestions=["Delete the director VM manually, then remove the bosh section"],
            )

        with tempfile.TemporaryDirectory(prefix="envteardown-bosh-") as workdir:
            work = Path(workdir)
            (work / MANIFEST_FILENAME).write_text(state.bosh.manifest)
            (work / STATE_FILENAME).write_text(json.dumps(state.bosh.state))
            (work / VARS_STORE_FILENAME).write_text(yaml.safe_dump(dict(state.bosh.credentials)))

            try:
                self.runner.run(
                    [
                        self.binary, "delete-env", MANIFEST_FILENAME,
                        f"--state={STATE_FILENAME}",
                        f"--vars-store={VARS_STORE_FILENAME}",
                        "--non-interactive",
                    ],
                    cwd=work,
                )
            except CommandError as e:
                partial = state.snapshot()
                partial.bosh.state = self._read_director_state(work, fallback=state.bosh.state)
                partial.bosh.credentials = self._read_vars_store(work, fallback=state.bosh.credentials)
                raise BOSHDeleteError(partial, e) from e

        logger.info(f"Director {state.bosh.director_name or '(unnamed)'} deleted")

    @staticmethod
    def _read_director_state(work: Path, fallback: Dict[str, Any]) -> Dict[str, Any]:
        try:
            data = json.loads((work / STATE_FILENAME).read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read director state after failed delete-env: {e}")
            return dict(fallback)
        return data if isinstance(data, dict) else dict(fallback)

    @staticmethod
    def _read_vars_store(work: Path, fallback: Dict[str, Any]) -> Dict[str, Any]:
        try:
            data = yaml.safe_load((work / VARS_STORE_FILENAME).read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read vars-store after failed delete-env: {e}")
            return dict(fallback)
        if not isinstance(data, dict):
            logger.warning("vars-store is not a mapping after failed delete-env")
            return dict(fallback)
        return data
