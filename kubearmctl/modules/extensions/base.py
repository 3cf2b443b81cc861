"""Base class for board and OS extensions."""
import logging
from dataclasses import dataclass
from typing import Callable

from kubearmctl.config import Settings
from kubearmctl.utils import run_command

HOOKS = ('pre_install', 'post_install')


@dataclass
class HookContext:
    """What a hook gets to work with."""
    settings: Settings
    run: Callable = run_command


class Extension:
    """No-op hook set; subclasses override only the hooks they need."""

    name = "base"

    def __init__(self):
        self.logger = logging.getLogger(f"kubearmctl.extensions.{self.name}")

    def pre_install(self, ctx: HookContext) -> None:
        pass

    def post_install(self, ctx: HookContext) -> None:
        pass


def has_hook(extension: Extension, hook: str) -> bool:
    """True if the extension overrides ``hook``."""
    if hook not in HOOKS:
        raise ValueError(f"Unknown hook: {hook}")
    return getattr(type(extension), hook) is not getattr(Extension, hook)
