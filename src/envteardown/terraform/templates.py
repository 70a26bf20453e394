"""Terraform configuration for GCP environments."""

GCP_TEMPLATE = """\
variable "project_id" {
  type = "string"
}

variable "env_id" {
  type = "string"
}

variable "region" {
  type = "string"
}

variable "zone" {
  type = "string"
}

variable "credentials" {
  type = "string"
}

provider "google" {
  credentials = "${file("${var.credentials}")}"
  project     = "${var.project_id}"
  region      = "${var.region}"
}

resource "google_compute_network" "bbl-network" {
  name = "${var.env_id}-network"
}

resource "google_compute_subnetwork" "bbl-subnet" {
  name          = "${var.env_id}-subnet"
  ip_cidr_range = "10.0.0.0/16"
  network       = "${google_compute_network.bbl-network.self_link}"
}

resource "google_compute_address" "bosh-external-ip" {
  name = "${var.env_id}-bosh-external-ip"
}

resource "google_compute_firewall" "bosh-open" {
  name    = "${var.env_id}-bosh-open"
  network = "${google_compute_network.bbl-network.name}"

  source_ranges = ["0.0.0.0/0"]

  allow {
    protocol = "icmp"
  }

  allow {
    ports    = ["22", "6868", "25555"]
    protocol = "tcp"
  }

  target_tags = ["${var.env_id}-bosh-open"]
}

resource "google_compute_firewall" "internal" {
  name    = "${var.env_id}-internal"
  network = "${google_compute_network.bbl-network.name}"

  allow {
    protocol = "icmp"
  }

  allow {
    protocol = "tcp"
  }

  allow {
    protocol = "udp"
  }

  source_tags = ["${var.env_id}-bosh-open", "${var.env_id}-internal"]
  target_tags = ["${var.env_id}-internal"]
}

output "external_ip" {
  value = "${google_compute_address.bosh-external-ip.address}"
}

output "network_name" {
  value = "${google_compute_network.bbl-network.name}"
}

output "subnetwork_name" {
  value = "${google_compute_subnetwork.bbl-subnet.name}"
}

output "bosh_open_tag_name" {
  value = "${google_compute_firewall.bosh-open.name}"
}

output "internal_tag_name" {
  value = "${google_compute_firewall.internal.name}"
}

output "director_address" {
  value = "https://${google_compute_address.bosh-external-ip.address}:25555"
}
"""


def render_gcp_template() -> str:
    """Return the Terraform configuration describing a GCP environment.

    Destroy needs the same configuration the environment was created with so
    that Terraform can plan the deletion of every resource in the state.
    """
    return GCP_TEMPLATE
