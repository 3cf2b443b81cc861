"""kubearmctl - install and administer Kubernetes on ARM single-board computers."""

__version__ = "0.1.0"
