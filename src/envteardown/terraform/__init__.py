"""Terraform adapters for the GCP teardown path."""

from .executor import TerraformCLI
from .outputs import TerraformOutputProvider
from .templates import render_gcp_template
from .version import parse_version

__all__ = [
    "TerraformCLI",
    "TerraformOutputProvider",
    "parse_version",
    "render_gcp_template",
]
