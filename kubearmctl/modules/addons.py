"""Create and delete addon manifests against the running cluster."""
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import yaml

from kubearmctl.config import Settings
from kubearmctl.errors import NodeInactiveError
from kubearmctl.modules.node import is_active
from kubearmctl.utils import run_command

logger = logging.getLogger("kubearmctl.addons")

VERSION_PLACEHOLDER = "VERSION"


class AddonManager:
    """Applies ``<addon_dir>/<name>.yaml`` with ``kubectl create|delete``."""

    def __init__(
        self,
        settings: Settings,
        active_check: Callable[[], bool] = is_active,
        run: Callable = run_command,
    ):
        self.settings = settings
        self.active_check = active_check
        self.run = run

    def manifest_path(self, name: str) -> Path:
        return self.settings.addon_dir / f"{name}.yaml"

    def available(self) -> List[str]:
        addon_dir = self.settings.addon_dir
        if not addon_dir.is_dir():
            return []
        return sorted(p.stem for p in addon_dir.glob("*.yaml"))

    def render(self, name: str) -> Optional[str]:
        """Manifest text with the addon version filled in, or None if missing."""
        path = self.manifest_path(name)
        if not path.is_file():
            return None
        return path.read_text().replace(VERSION_PLACEHOLDER, self.settings.addon_version)

    def apply(self, names: Iterable[str]) -> List[str]:
        return self._submit("create", names)

    def remove(self, names: Iterable[str]) -> List[str]:
        return self._submit("delete", names)

    def _submit(self, action: str, names: Iterable[str]) -> List[str]:
        names = list(names)
        if not self.active_check():
            raise NodeInactiveError(
                "❌ Kubernetes is not running on this node. Enable it as master or worker first."
            )

        submitted = []
        for name in names:
            manifest = self.render(name)
            if manifest is None:
                logger.warning(f"⚠️  No addon named '{name}' ({self.manifest_path(name)} not found), skipping")
                continue

            for kind, obj_name in _describe(manifest):
                logger.debug(f"📄 {action} {kind}/{obj_name}")
            logger.info(f"📦 {action.capitalize()} addon {name}")
            self.run(
                ["kubectl", "--server", self.settings.api_server, action, "-f", "-"],
                input_text=manifest,
            )
            submitted.append(name)
        return submitted


def _describe(manifest: str) -> List[tuple]:
    """(kind, name) of each resource in a manifest; empty if it does not parse."""
    try:
        docs = list(yaml.safe_load_all(manifest))
    except yaml.YAMLError as e:
        logger.debug(f"Could not parse manifest: {e}")
        return []
    return [
        (doc.get("kind", "?"), (doc.get("metadata") or {}).get("name", "?"))
        for doc in docs
        if isinstance(doc, dict)
    ]
