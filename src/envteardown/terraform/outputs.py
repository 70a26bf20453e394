"""Resolve GCP environment identifiers from the Terraform state."""

from envteardown.state.models import State
from envteardown.teardown.base import TerraformOutputProvider as TerraformOutputProviderBase
from envteardown.teardown.base import TerraformOutputs

from .executor import TerraformCLI

# Terraform output name -> TerraformOutputs attribute
OUTPUT_NAMES = {
    "external_ip": "external_ip",
    "network_name": "network_name",
    "subnetwork_name": "subnetwork_name",
    "bosh_open_tag_name": "bosh_tag",
    "internal_tag_name": "internal_tag",
    "director_address": "director_address",
}


class TerraformOutputProvider(TerraformOutputProviderBase):
    """Reads outputs with ``terraform output``; an empty state has none."""

    def __init__(self, terraform: TerraformCLI):
        self.terraform = terraform

    def get(self, state: State) -> TerraformOutputs:
        raw = self.terraform.outputs(state.tf_state)
        return TerraformOutputs(
            **{attr: raw.get(name, "") for name, attr in OUTPUT_NAMES.items()}
        )
