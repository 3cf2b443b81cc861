from typing import List, Optional

import typer

from kubearmctl.commands import get_settings
from kubearmctl.modules.addons import AddonManager


def _list_available(manager: AddonManager) -> None:
    available = manager.available()
    if available:
        typer.echo("Available addons: " + ", ".join(available))
    else:
        typer.echo(f"No addons found in {manager.settings.addon_dir}")


def enable_addon_cmd(
    ctx: typer.Context,
    names: Optional[List[str]] = typer.Argument(None, help="Addons to create"),
):
    """Create one or more addons in the cluster."""
    manager = AddonManager(get_settings(ctx))
    if not names:
        _list_available(manager)
        return
    manager.apply(names)


def disable_addon_cmd(
    ctx: typer.Context,
    names: Optional[List[str]] = typer.Argument(None, help="Addons to delete"),
):
    """Delete one or more addons from the cluster."""
    manager = AddonManager(get_settings(ctx))
    if not names:
        _list_available(manager)
        return
    manager.remove(names)
