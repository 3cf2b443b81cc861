"""Board and operating-system extensions.

Each extension is registered by name and may implement any of the
optional install hooks. Hooks that an extension does not define fall
back to the no-op defaults of :class:`Extension` and are skipped by
the installer.
"""
from typing import Dict, Type

from .base import Extension, HookContext, has_hook

BOARDS: Dict[str, Type[Extension]] = {}
OPERATING_SYSTEMS: Dict[str, Type[Extension]] = {}


def register_board(name: str):
    def decorator(cls: Type[Extension]) -> Type[Extension]:
        cls.name = name
        BOARDS[name] = cls
        return cls
    return decorator


def register_os(name: str):
    def decorator(cls: Type[Extension]) -> Type[Extension]:
        cls.name = name
        OPERATING_SYSTEMS[name] = cls
        return cls
    return decorator


# Populate the registries
from . import boards, systems  # noqa: E402,F401

__all__ = [
    'BOARDS',
    'OPERATING_SYSTEMS',
    'Extension',
    'HookContext',
    'has_hook',
    'register_board',
    'register_os',
]
