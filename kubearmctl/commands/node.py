from typing import Optional

import typer

from kubearmctl.commands import get_settings
from kubearmctl.modules import lifecycle
from kubearmctl.modules.config_store import ConfigStore


def enable_master_cmd(ctx: typer.Context):
    """Start the master components on this node."""
    settings = get_settings(ctx)
    ConfigStore.open(settings.config_file)
    lifecycle.enable_master(settings)


def enable_worker_cmd(
    ctx: typer.Context,
    master_ip: Optional[str] = typer.Argument(None, help="Master IP; defaults to the last one used"),
):
    """Join this node to a running master."""
    settings = get_settings(ctx)
    store = ConfigStore.open(settings.config_file)
    lifecycle.enable_worker(settings, store, master_ip)


def disable_cmd(ctx: typer.Context):
    """Stop Kubernetes on this node."""
    settings = get_settings(ctx)
    ConfigStore.open(settings.config_file)
    lifecycle.disable(settings)


def delete_data_cmd(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Remove kubelet and etcd data left after 'disable'."""
    if not yes:
        confirm = typer.confirm("Delete all Kubernetes data on this node?", default=False)
        if not confirm:
            print("❌ Deletion cancelled.")
            raise typer.Exit()
    removed = lifecycle.delete_data()
    print(f"✅ Removed {len(removed)} data director{'y' if len(removed) == 1 else 'ies'}.")
