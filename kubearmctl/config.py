"""Configuration management for the kubearmctl application.

Settings are loaded once at process entry with the following precedence:
1. Process environment variables
2. The node Config Store (``/etc/kubernetes/k8s.conf``)
3. A ``.env`` file in the working directory
4. Default values
"""
import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger("kubearmctl.config")

DEFAULT_CONFIG_DIR = Path("/etc/kubernetes")

# Setting name -> environment/config-store key
ENV_KEYS: Dict[str, str] = {
    "config_dir": "KUBE_CONFIG_DIR",
    "addon_dir": "ADDON_DIR",
    "kube_deploy_dir": "KUBE_DEPLOY_DIR",
    "bin_dir": "BIN_DIR",
    "k8s_version": "K8S_VERSION",
    "addon_version": "ADDON_VERSION",
    "helm_version": "HELM_VERSION",
    "kube_deploy_repo": "KUBE_DEPLOY_REPO",
    "kube_deploy_commit": "KUBE_DEPLOY_COMMIT",
    "kubectl_url": "KUBECTL_URL",
    "helm_url": "HELM_URL",
    "api_server": "API_SERVER",
    "master_port": "MASTER_PORT",
    "probe_timeout": "PROBE_TIMEOUT",
    "swap_size_mb": "SWAP_SIZE_MB",
    "board": "BOARD",
    "os": "OS",
    "new_hostname": "NEW_HOSTNAME",
    "timezone": "TIMEZONE",
    "storage_driver": "STORAGE_DRIVER",
    "swap": "SWAP",
    "reboot": "REBOOT",
}


class Settings(BaseModel):
    """Node configuration passed explicitly to every component."""

    # Filesystem layout
    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR, description="Base directory for kubearmctl state")
    addon_dir: Optional[Path] = Field(default=None, description="Directory holding <addon>.yaml manifests")
    kube_deploy_dir: Optional[Path] = Field(default=None, description="Checkout of the orchestration project")
    bin_dir: Path = Field(default=Path("/usr/local/bin"), description="Install location for downloaded binaries")
    docker_unit_paths: tuple = Field(
        default=(
            Path("/etc/systemd/system/docker.service"),
            Path("/lib/systemd/system/docker.service"),
            Path("/usr/lib/systemd/system/docker.service"),
        ),
        description="Candidate docker service unit files, first existing wins",
    )
    swap_file: Path = Field(default=Path("/swapfile"))
    fstab_path: Path = Field(default=Path("/etc/fstab"))

    # Pinned versions
    k8s_version: str = Field(default="v1.3.6", description="Kubernetes version handed to the orchestration scripts")
    addon_version: str = Field(default="v0.8.0", description="Image tag substituted into addon manifests")
    helm_version: str = Field(default="v2.0.0-alpha.4")
    kube_deploy_repo: str = Field(default="https://github.com/kubernetes/kube-deploy")
    kube_deploy_commit: str = Field(default="5a40b3d3c5bd4b3b2d3e5c1f0b4dbf4e8c09a6b1")
    kubectl_url: str = Field(
        default="https://storage.googleapis.com/kubernetes-release/release/{version}/bin/linux/{arch}/kubectl"
    )
    helm_url: str = Field(default="https://storage.googleapis.com/kubernetes-helm/helm-{version}-linux-{arch}.tar.gz")

    # Cluster access
    api_server: str = Field(default="http://localhost:8080", description="Local insecure API server endpoint")
    master_port: int = Field(default=8080, description="Port probed on the master before a worker joins")
    probe_timeout: float = Field(default=5.0, description="Master liveness probe timeout in seconds")

    swap_size_mb: int = Field(default=1024)

    # Non-interactive install inputs; None means "ask"
    board: Optional[str] = None
    os: Optional[str] = None
    new_hostname: Optional[str] = None
    timezone: Optional[str] = None
    storage_driver: Optional[str] = None
    swap: Optional[bool] = None
    reboot: Optional[bool] = None

    def __init__(self, **data: Any):
        super().__init__(**data)
        if self.addon_dir is None:
            self.addon_dir = self.config_dir / "addons"
        if self.kube_deploy_dir is None:
            self.kube_deploy_dir = self.config_dir / "kube-deploy"

    @property
    def config_file(self) -> Path:
        """Path of the Config Store."""
        return self.config_dir / "k8s.conf"

    @property
    def env_file(self) -> Path:
        """Path of the persisted board/OS profile."""
        return self.config_dir / "dynamic-env" / "env.conf"

    @property
    def build_metadata_file(self) -> Path:
        return self.config_dir / "build-metadata"

    @property
    def multinode_dir(self) -> Path:
        """Directory containing master.sh, worker.sh and turndown.sh."""
        return self.kube_deploy_dir / "docker-multinode"

    @classmethod
    def load(cls, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """Build settings from the environment and the node Config Store."""
        values: Dict[str, Any] = {}
        if environ is None:
            dotenv_file = find_dotenv(usecwd=True)
            if dotenv_file:
                values.update({k: v for k, v in dotenv_values(dotenv_file).items() if v is not None})
            environ = dict(os.environ)

        config_dir = Path(environ.get("KUBE_CONFIG_DIR", values.get("KUBE_CONFIG_DIR", str(DEFAULT_CONFIG_DIR))))

        store_path = config_dir / "k8s.conf"
        if store_path.exists():
            logger.debug(f"Reading config store {store_path}")
            values.update({k: v for k, v in dotenv_values(store_path).items() if v is not None})

        values.update(environ)

        data = {}
        for field_name, key in ENV_KEYS.items():
            value = values.get(key)
            if value is None or value == "":
                continue
            data[field_name] = value
        return cls(**data)
