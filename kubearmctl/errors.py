"""Exceptions raised by kubearmctl components."""


class KubearmError(Exception):
    """Base error; the CLI prints the message and exits non-zero."""
    pass


class ConfigMissingError(KubearmError):
    """The node Config Store file does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Config store not found: {path}. Run 'kubearmctl install' first.")


class InvalidProfileError(KubearmError):
    """Unknown board or operating system name."""
    pass


class MasterNotFoundError(KubearmError):
    """The master could not be resolved or did not answer the liveness probe."""
    pass


class NodeInactiveError(KubearmError):
    """No kubelet is running on this node."""
    pass


class RuntimeUnitError(KubearmError):
    """The container runtime service unit is missing or unrecognised."""
    pass
