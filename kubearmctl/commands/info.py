import typer
from rich.console import Console
from rich.table import Table

from kubearmctl.commands import get_settings
from kubearmctl.modules.status import collect_info

console = Console()


def info_cmd(ctx: typer.Context):
    """Show hardware, versions and Kubernetes process CPU time."""
    info = collect_info(get_settings(ctx))
    table = Table(title="Node info", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in info.items():
        table.add_row(key, "" if value is None else str(value))
    console.print(table)
