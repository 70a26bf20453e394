"""GCP teardown: Terraform-managed network and the project SSH key."""

from envteardown.state.checkpoint import CheckpointWriter
from envteardown.state.models import KeyPair, State
from envteardown.terraform.templates import render_gcp_template
from envteardown.utils.errors import AggregateError
from envteardown.utils.logging import get_logger

from .base import (
    KeyPairDeleter,
    NetworkSafetyChecker,
    Reporter,
    TeardownStrategy,
    TerraformDestroyError,
    TerraformExecutor,
    TerraformOutputProvider,
)

logger = get_logger(__name__)


class GCPTeardown(TeardownStrategy):
    """Runs ``terraform destroy`` and removes the project SSH key."""

    def __init__(
        self,
        terraform_output_provider: TerraformOutputProvider,
        network_instances_checker: NetworkSafetyChecker,
        terraform_executor: TerraformExecutor,
        key_pair_deleter: KeyPairDeleter,
        checkpoints: CheckpointWriter,
        reporter: Reporter,
    ):
        self.terraform_output_provider = terraform_output_provider
        self.network_instances_checker = network_instances_checker
        self.terraform_executor = terraform_executor
        self.key_pair_deleter = key_pair_deleter
        self.checkpoints = checkpoints
        self.reporter = reporter

    def run(self, state: State) -> State:
        """
        Tear down the GCP environment.

        The Terraform state returned by destroy is kept even on failure so the
        next run only destroys what is left. On success nothing is
        checkpointed until the key pair is gone; that checkpoint covers both and
        clears the Terraform state.

        Raises:
            TerraformDestroyError: destroy failed (partial state checkpointed)
            AggregateError: destroy failed and so did the checkpoint
        """
        outputs = self.terraform_output_provider.get(state)
        self.network_instances_checker.validate_safe_to_delete(outputs.network_name)

        self.reporter.step("destroying infrastructure")
        try:
            state.tf_state = self.terraform_executor.destroy(
                credentials=state.gcp.service_account_key,
                env_id=state.env_id,
                project_id=state.gcp.project_id,
                zone=state.gcp.zone,
                region=state.gcp.region,
                tf_state=state.tf_state,
                template=render_gcp_template(),
            )
        except TerraformDestroyError as destroy_error:
            logger.warning(f"terraform destroy failed, saving partial state: {destroy_error}")
            state.tf_state = destroy_error.tf_state
            try:
                self.checkpoints.checkpoint(state, "partial terraform destroy")
            except Exception as save_error:
                raise AggregateError([destroy_error, save_error]) from destroy_error
            raise

        self.reporter.step("deleting keypair")
        self.key_pair_deleter.delete(state.key_pair.public_key)

        state.key_pair = KeyPair()
        state.tf_state = ""
        self.checkpoints.checkpoint(state, "terraform destroy and key pair deletion")
        return state
