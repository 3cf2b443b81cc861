import typer

from kubearmctl.config import Settings


def get_settings(ctx: typer.Context) -> Settings:
    """Settings loaded by the CLI callback, or loaded now if missing."""
    if not isinstance(ctx.obj, Settings):
        ctx.obj = Settings.load()
    return ctx.obj
