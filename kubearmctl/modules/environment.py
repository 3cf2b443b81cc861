"""Board/OS environment resolution.

The profile is asked for once, then persisted to
``<config_dir>/dynamic-env/env.conf`` so later commands reuse it silently.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import typer
from dotenv import dotenv_values

from kubearmctl.config import Settings
from kubearmctl.errors import InvalidProfileError
from kubearmctl.modules.extensions import BOARDS, OPERATING_SYSTEMS, Extension

logger = logging.getLogger("kubearmctl.environment")


@dataclass(frozen=True)
class EnvironmentProfile:
    """The (board, os) pair a node was installed with."""
    board: str
    os: str

    def validate(self) -> "EnvironmentProfile":
        if self.board not in BOARDS:
            raise InvalidProfileError(
                f"❌ Unknown board '{self.board}'. Available: {', '.join(sorted(BOARDS))}"
            )
        if self.os not in OPERATING_SYSTEMS:
            raise InvalidProfileError(
                f"❌ Unknown OS '{self.os}'. Available: {', '.join(sorted(OPERATING_SYSTEMS))}"
            )
        return self


def read_profile(settings: Settings) -> Optional[EnvironmentProfile]:
    """Return the persisted profile, or None if there is none."""
    if not settings.env_file.is_file():
        return None
    values = dotenv_values(settings.env_file)
    board, os_name = values.get("BOARD"), values.get("OS")
    if not board or not os_name:
        logger.warning(f"⚠️  Ignoring incomplete profile in {settings.env_file}")
        return None
    return EnvironmentProfile(board=board, os=os_name)


def write_profile(settings: Settings, profile: EnvironmentProfile) -> None:
    settings.env_file.parent.mkdir(parents=True, exist_ok=True)
    settings.env_file.write_text(f"OS={profile.os}\nBOARD={profile.board}\n")
    logger.debug(f"Persisted profile {profile} to {settings.env_file}")


def resolve_profile(
    settings: Settings,
    prompt: Callable[[str], str] = typer.prompt,
) -> EnvironmentProfile:
    """Find out which board and OS this node runs.

    Order: persisted profile, then the BOARD/OS settings, then an
    interactive prompt listing the registered extensions. An unknown
    name is fatal; there is no second chance to type it.
    """
    profile = read_profile(settings)
    if profile is None:
        board = settings.board
        if not board:
            typer.echo(f"Which board is this? Choices: {', '.join(sorted(BOARDS))}")
            board = prompt("Board").strip()
        os_name = settings.os
        if not os_name:
            typer.echo(f"Which OS is this? Choices: {', '.join(sorted(OPERATING_SYSTEMS))}")
            os_name = prompt("OS").strip()
        profile = EnvironmentProfile(board=board, os=os_name)
    else:
        logger.debug(f"Using persisted profile {profile}")

    profile.validate()
    write_profile(settings, profile)
    return profile


def load_hooks(profile: EnvironmentProfile) -> Tuple[Extension, Extension]:
    """Instantiate the (board, os) extensions of a validated profile."""
    profile.validate()
    return BOARDS[profile.board](), OPERATING_SYSTEMS[profile.os]()
