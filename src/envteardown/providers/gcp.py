"""GCP adapters built on the gcloud command line."""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from envteardown.teardown.base import KeyPairDeleter, NetworkSafetyChecker
from envteardown.utils.commands import CommandRunner, ExecutionResult
from envteardown.utils.errors import CommandError, UnsafeDeleteError
from envteardown.utils.logging import get_logger

logger = get_logger(__name__)

SSH_KEYS_METADATA = "ssh-keys"


class GCloudClient:
    """Runs gcloud against one project as the environment's service account."""

    def __init__(
        self,
        service_account_key: str,
        project_id: str,
        binary: str = "gcloud",
        runner: Optional[CommandRunner] = None,
    ):
        self.service_account_key = service_account_key
        self.project_id = project_id
        self.binary = binary
        self.runner = runner or CommandRunner()

    def run(self, args: List[str]) -> ExecutionResult:
        with tempfile.TemporaryDirectory(prefix="envteardown-gcloud-") as workdir:
            key_file = Path(workdir) / "service-account.json"
            key_file.write_text(self.service_account_key)
            return self.runner.run(
                [self.binary] + args + [f"--project={self.project_id}", "--quiet"],
                env={"CLOUDSDK_AUTH_CREDENTIAL_FILE_OVERRIDE": str(key_file)},
            )

    def run_json(self, args: List[str]) -> Any:
        result = self.run(args + ["--format=json"])
        try:
            return json.loads(result.stdout or "null")
        except json.JSONDecodeError as e:
            raise CommandError(f"gcloud returned invalid JSON for {' '.join(args)}: {e}", cause=e)

    def list_instances(self) -> List[Dict[str, Any]]:
        return self.run_json(["compute", "instances", "list"]) or []

    def project_metadata(self) -> Dict[str, str]:
        info = self.run_json(["compute", "project-info", "describe"]) or {}
        items = info.get("commonInstanceMetadata", {}).get("items", [])
        return {item["key"]: item.get("value", "") for item in items}

    def set_project_metadata(self, key: str, value: str) -> None:
        with tempfile.TemporaryDirectory(prefix="envteardown-gcloud-") as workdir:
            value_file = Path(workdir) / key
            value_file.write_text(value)
            self.run(["compute", "project-info", "add-metadata",
                      f"--metadata-from-file={key}={value_file}"])

    def remove_project_metadata(self, key: str) -> None:
        self.run(["compute", "project-info", "remove-metadata", f"--keys={key}"])


class NetworkInstancesChecker(NetworkSafetyChecker):
    """Refuses deletion while instances are still attached to the network."""

    def __init__(self, gcloud: GCloudClient):
        self.gcloud = gcloud

    def validate_safe_to_delete(self, identifier: str) -> None:
        if not identifier:
            logger.debug("No network recorded, nothing to check")
            return

        remaining = []
        for instance in self.gcloud.list_instances():
            for interface in instance.get("networkInterfaces", []):
                # Interfaces reference their network by URL.
                if interface.get("network", "").rsplit("/", 1)[-1] == identifier:
                    remaining.append(instance.get("name", "unnamed"))
                    break

        if remaining:
            raise UnsafeDeleteError(
                f"network {identifier} is not safe to delete; vms still exist: [{', '.join(sorted(remaining))}]",
                suggestions=["Delete the remaining deployments with bosh before destroying the environment"],
            )


class GCPKeyPairDeleter(KeyPairDeleter):
    """Removes the environment's public key from the project ``ssh-keys`` metadata."""

    def __init__(self, gcloud: GCloudClient):
        self.gcloud = gcloud

    def delete(self, identifier: str) -> None:
        public_key = identifier.strip()
        if not public_key:
            logger.debug("No public key recorded, nothing to delete")
            return

        entries = self.gcloud.project_metadata().get(SSH_KEYS_METADATA, "")
        lines = [line for line in entries.splitlines() if line.strip()]
        # Entries look like "user:ssh-rsa AAAA... comment".
        kept = [line for line in lines if public_key not in line]

        if len(kept) == len(lines):
            logger.info("Public key not present in project metadata")
            return

        if kept:
            self.gcloud.set_project_metadata(SSH_KEYS_METADATA, "\n".join(kept))
        else:
            self.gcloud.remove_project_metadata(SSH_KEYS_METADATA)
        logger.info(f"Removed {len(lines) - len(kept)} ssh key(s) from project metadata")
