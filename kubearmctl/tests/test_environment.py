import pytest

from kubearmctl.errors import InvalidProfileError
from kubearmctl.modules.environment import (
    EnvironmentProfile,
    load_hooks,
    read_profile,
    resolve_profile,
)
from kubearmctl.modules.extensions import BOARDS, OPERATING_SYSTEMS, has_hook


def no_prompt(*args, **kwargs):
    raise AssertionError("prompted unexpectedly")


def test_registries_are_populated():
    assert {"rpi", "rpi-2", "rpi-3", "odroid-c2", "pine64"} <= set(BOARDS)
    assert {"hypriotos", "archlinux", "raspbian"} <= set(OPERATING_SYSTEMS)


def test_resolve_from_settings_persists_profile(settings):
    settings.board, settings.os = "rpi-2", "hypriotos"
    profile = resolve_profile(settings, prompt=no_prompt)
    assert profile == EnvironmentProfile(board="rpi-2", os="hypriotos")
    assert settings.env_file.read_text() == "OS=hypriotos\nBOARD=rpi-2\n"


def test_persisted_profile_wins(settings):
    settings.env_file.parent.mkdir(parents=True)
    settings.env_file.write_text("OS=archlinux\nBOARD=rpi-3\n")
    settings.board, settings.os = "pine64", "raspbian"
    profile = resolve_profile(settings, prompt=no_prompt)
    assert profile == EnvironmentProfile(board="rpi-3", os="archlinux")


def test_prompts_when_unknown(settings):
    answers = iter(["odroid-c2", "archlinux"])
    profile = resolve_profile(settings, prompt=lambda label: next(answers))
    assert profile == EnvironmentProfile(board="odroid-c2", os="archlinux")
    assert read_profile(settings) == profile


def test_invalid_board_is_fatal_and_not_persisted(settings):
    settings.board, settings.os = "commodore64", "hypriotos"
    with pytest.raises(InvalidProfileError):
        resolve_profile(settings, prompt=no_prompt)
    assert not settings.env_file.exists()


def test_invalid_os_is_fatal(settings):
    settings.board, settings.os = "rpi", "windows"
    with pytest.raises(InvalidProfileError):
        resolve_profile(settings, prompt=no_prompt)


def test_hooks_are_optional():
    board, os_ext = load_hooks(EnvironmentProfile(board="pine64", os="archlinux"))
    assert not has_hook(board, "pre_install")
    assert not has_hook(board, "post_install")
    assert has_hook(os_ext, "pre_install")
    assert not has_hook(os_ext, "post_install")

    board, _ = load_hooks(EnvironmentProfile(board="rpi-3", os="hypriotos"))
    assert has_hook(board, "post_install")
