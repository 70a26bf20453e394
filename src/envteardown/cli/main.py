"""Main CLI entry point."""

import sys
from typing import Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from envteardown.bosh import BOSHCLI
from envteardown.config.models import Settings
from envteardown.config.parser import Config, ConfigValidationError
from envteardown.providers import (
    CloudFormationInfrastructureManager,
    CloudFormationStackManager,
    EC2KeyPairDeleter,
    GCloudClient,
    GCPKeyPairDeleter,
    IAMCertificateDeleter,
    NetworkInstancesChecker,
    ProviderCredentialValidator,
    VPCStatusChecker,
)
from envteardown.state.manager import StateManager
from envteardown.state.models import State
from envteardown.state.validator import StateFileValidator
from envteardown.teardown.destroy import Destroy
from envteardown.terraform import TerraformCLI, TerraformOutputProvider
from envteardown.utils.aws_client import AWSClientManager
from envteardown.utils.errors import TeardownError, error_handler
from envteardown.utils.logging import get_logger, setup_logging
from envteardown.cli.output import ConsoleReporter, print_result

console = Console()
logger = get_logger(__name__)


@click.group()
@click.option('--config', 'config_path', default='envteardown.yaml', show_default=True,
              help='Settings file')
@click.option('--state-dir', help='Directory holding the state file')
@click.option('--log-level', type=click.Choice(['debug', 'info', 'warning', 'error']),
              help='Console log level')
@click.pass_context
def cli(ctx, config_path, state_dir, log_level):
    """Tear down environments created by the bootstrap tool."""
    ctx.ensure_object(dict)
    settings = load_settings(config_path, state_dir=state_dir, log_level=log_level)
    ctx.obj['settings'] = settings

    setup_logging(settings.log_level, settings.log_dir)


def load_settings(config_path: str, **overrides) -> Settings:
    """Load envteardown.yaml, exiting with a message if it is invalid."""
    try:
        return Config(config_path).load(overrides).settings
    except ConfigValidationError as e:
        console.print("[red]Configuration validation failed:[/red]\n")
        console.print(str(e))
        sys.exit(1)


def create_destroy(settings: Settings, state: State, state_manager: StateManager,
                   reporter: ConsoleReporter) -> Destroy:
    """Create the destroy orchestrator with all its collaborators."""
    aws = AWSClientManager(
        access_key_id=state.aws.access_key_id or None,
        secret_access_key=state.aws.secret_access_key or None,
        region=state.aws.region or None,
        profile=settings.aws_profile,
    )
    gcloud = GCloudClient(
        service_account_key=state.gcp.service_account_key,
        project_id=state.gcp.project_id,
        binary=settings.gcloud_binary,
    )
    terraform = TerraformCLI(binary=settings.terraform_binary)

    return Destroy(
        credential_validator=ProviderCredentialValidator(),
        reporter=reporter,
        state_store=state_manager,
        state_validator=StateFileValidator(state_manager),
        terraform_executor=terraform,
        bosh_manager=BOSHCLI(binary=settings.bosh_binary),
        stack_manager=CloudFormationStackManager(aws),
        infrastructure_manager=CloudFormationInfrastructureManager(aws),
        vpc_status_checker=VPCStatusChecker(aws),
        certificate_deleter=IAMCertificateDeleter(aws),
        aws_key_pair_deleter=EC2KeyPairDeleter(aws),
        terraform_output_provider=TerraformOutputProvider(terraform),
        network_instances_checker=NetworkInstancesChecker(gcloud),
        gcp_key_pair_deleter=GCPKeyPairDeleter(gcloud),
    )


@cli.command(context_settings={'ignore_unknown_options': True})
@click.argument('flags', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def destroy(ctx, flags: Tuple[str, ...]):
    """Tear down the environment recorded in the state directory.

    \b
    Flags:
      --skip-if-missing  exit quietly when there is no state file
      --no-confirm, -n   do not ask for confirmation
    """
    settings: Settings = ctx.obj['settings']
    reporter = ConsoleReporter(console)

    try:
        state_manager = StateManager(settings.state_dir)
        state = state_manager.load()

        orchestrator = create_destroy(settings, state, state_manager, reporter)
        result = orchestrator.execute(list(flags), state)

        print_result(console, result)

    except TeardownError as e:
        error_handler.log_error(e)
        console.print()
        console.print(Panel.fit(
            f"[red]✗ Destroy failed[/red]\n\n{escape(e.to_user_message())}",
            title="Destroy Failed",
            border_style="red"
        ))
        console.print("\n[dim]Completed steps are saved; re-run destroy to continue.[/dim]")
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error during destroy")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        sys.exit(1)


def main():
    """Console script entry point."""
    cli(obj={})


if __name__ == '__main__':
    main()
