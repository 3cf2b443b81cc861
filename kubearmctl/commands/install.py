import logging

import typer

from kubearmctl.commands import get_settings
from kubearmctl.modules.environment import load_hooks, resolve_profile
from kubearmctl.modules.installer import Installer

logger = logging.getLogger("kubearmctl.commands.install")


def install_cmd(ctx: typer.Context):
    """Prepare this node: docker, kube-deploy, kubectl/helm, hostname, timezone, storage driver, swap."""
    settings = get_settings(ctx)
    profile = resolve_profile(settings)
    installer = Installer(settings, profile, load_hooks(profile))
    installer.run_all()
