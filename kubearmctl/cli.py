import logging
import sys
from typing import List, Optional

import typer
from typer.core import TyperGroup

from kubearmctl.commands import addon, info, install, node
from kubearmctl.config import Settings
from kubearmctl.errors import KubearmError
from kubearmctl.logging import setup_logging


class HelpFallbackGroup(TyperGroup):
    """Case-insensitive command lookup; unknown commands show help."""

    def get_command(self, ctx, cmd_name):
        command = super().get_command(ctx, cmd_name.lower())
        if command is None and not ctx.resilient_parsing:
            command = super().get_command(ctx, "help")
        return command


app = typer.Typer(
    cls=HelpFallbackGroup,
    no_args_is_help=True,
    add_completion=False,
    help="kubearmctl - Kubernetes on ARM node installer and admin tool.",
)

# Global debug flag
debug_mode = False


# Global options callback
@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """kubearmctl - Kubernetes on ARM node installer and admin tool."""
    global debug_mode
    debug_mode = debug
    setup_logging(debug)
    if debug:
        logging.debug("Debug mode enabled")
    ctx.obj = Settings.load()


app.command("install")(install.install_cmd)
app.command("enable-master")(node.enable_master_cmd)
app.command("enable-worker")(node.enable_worker_cmd)
app.command("enable-addon")(addon.enable_addon_cmd)
app.command("disable")(node.disable_cmd)
app.command("disable-addon")(addon.disable_addon_cmd)
app.command("delete-data")(node.delete_data_cmd)
app.command("info")(info.info_cmd)


@app.command(
    "help",
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
def help_cmd(
    ctx: typer.Context,
    args: Optional[List[str]] = typer.Argument(None, hidden=True),
):
    """Show this message."""
    typer.echo(ctx.parent.get_help())


def main():
    try:
        app()
    except KubearmError as e:
        logging.error(str(e))
        sys.exit(1)
    except Exception as e:
        if debug_mode:
            import traceback
            logging.error(f"Unhandled exception: {e}\n{traceback.format_exc()}")
        else:
            logging.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
