"""Single-node Kubernetes provisioning."""

__version__ = "0.1.0"
