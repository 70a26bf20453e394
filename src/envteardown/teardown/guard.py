"""Pre-flight checks run before anything is deleted."""

from dataclasses import dataclass
from typing import List, Sequence

import click

from envteardown.state.models import IAAS, State
from envteardown.terraform.version import parse_version
from envteardown.utils.errors import ErrorCategory, FlagError, TeardownError
from envteardown.utils.logging import get_logger

from .base import CredentialValidator, Reporter, StateValidator, TerraformExecutor

logger = get_logger(__name__)

MINIMUM_TERRAFORM_VERSION = "0.8.5"

CONFIRMATION_PROMPT = 'Are you sure you want to delete infrastructure for "{env_id}"? This operation cannot be undone!'
SKIP_MESSAGE = "state file not found, and --skip-if-missing flag provided, exiting"
CANCEL_MESSAGE = "exiting"


class TerraformVersionError(TeardownError):
    """The installed terraform is older than the supported minimum."""

    def __init__(self, minimum: str = MINIMUM_TERRAFORM_VERSION, found: str = ""):
        super().__init__(
            f"Terraform version must be at least v{minimum}",
            category=ErrorCategory.VALIDATION,
            suggestions=[f"Installed version is {found}" if found else "Check `terraform version`"],
        )
        self.minimum = minimum
        self.found = found


@dataclass
class DestroyFlags:
    """Options accepted by destroy."""

    skip_if_missing: bool = False
    no_confirm: bool = False


# Flag names accepted with one or two leading dashes, mapped to the
# spelling the click definition below expects.
_FLAG_SPELLINGS = {
    "skip-if-missing": "--skip-if-missing",
    "no-confirm": "--no-confirm",
    "n": "-n",
}

_flag_command = click.Command(
    "destroy",
    params=[
        click.Option(["--skip-if-missing"], is_flag=True, default=False),
        click.Option(["--no-confirm", "-n"], is_flag=True, default=False),
    ],
    add_help_option=False,
)


def _normalize(flags: Sequence[str]) -> List[str]:
    normalized = []
    for index, flag in enumerate(flags):
        if flag == "--":
            normalized.extend(flags[index:])
            break
        if not flag.startswith("-") or flag == "-":
            normalized.append(flag)
            continue

        name, sep, value = flag.lstrip("-").partition("=")
        if name not in _FLAG_SPELLINGS:
            raise FlagError(f"flag provided but not defined: -{name}")
        if sep:
            raise FlagError(f"invalid boolean flag {name}: {value}")
        normalized.append(_FLAG_SPELLINGS[name])
    return normalized


def parse_flags(flags: Sequence[str]) -> DestroyFlags:
    """Parse destroy's own flags.

    Raises:
        FlagError: on an unknown flag or an unexpected argument
    """
    args = _normalize(flags)
    try:
        ctx = _flag_command.make_context("destroy", args)
    except click.UsageError as e:
        raise FlagError(e.format_message(), cause=e)

    return DestroyFlags(
        skip_if_missing=ctx.params["skip_if_missing"],
        no_confirm=ctx.params["no_confirm"],
    )


def is_confirmation(answer: str) -> bool:
    return answer.strip().lower() in ("yes", "y")


class Guard:
    """Pre-flight checks, called by the orchestrator in order.

    The two checks that may end a run quietly return a bool; every other
    failing check raises.
    """

    def __init__(
        self,
        state_validator: StateValidator,
        terraform_executor: TerraformExecutor,
        credential_validator: CredentialValidator,
        reporter: Reporter,
    ):
        self.state_validator = state_validator
        self.terraform_executor = terraform_executor
        self.credential_validator = credential_validator
        self.reporter = reporter

    def skip_missing(self, flags: DestroyFlags, state: State) -> bool:
        if flags.skip_if_missing and state.is_empty():
            self.reporter.step(SKIP_MESSAGE)
            return True
        return False

    def validate_state(self, state: State) -> None:
        self.state_validator.validate(state)

    def confirm(self, flags: DestroyFlags, state: State) -> bool:
        if flags.no_confirm:
            return True

        answer = self.reporter.prompt(CONFIRMATION_PROMPT.format(env_id=state.env_id))
        if is_confirmation(answer):
            return True

        logger.info("Destroy declined at confirmation prompt")
        self.reporter.step(CANCEL_MESSAGE)
        return False

    def check_terraform_version(self) -> None:
        found = self.terraform_executor.version()
        try:
            installed = parse_version(found)
        except ValueError as e:
            raise TeardownError(str(e), category=ErrorCategory.VALIDATION, cause=e)
        if installed < parse_version(MINIMUM_TERRAFORM_VERSION):
            raise TerraformVersionError(found=found)
        logger.debug(f"terraform {found} satisfies minimum {MINIMUM_TERRAFORM_VERSION}")

    def validate_credentials(self, state: State) -> None:
        if state.iaas == IAAS.AWS:
            self.credential_validator.validate_aws(state.aws)
        elif state.iaas == IAAS.GCP:
            self.credential_validator.validate_gcp(state.gcp)
        else:
            logger.debug("No provider recorded, skipping credential validation")
