import pytest

from kubearmctl.errors import RuntimeUnitError
from kubearmctl.modules import system

UNIT = """[Unit]
Description=Docker Application Container Engine

[Service]
ExecStart=/usr/bin/docker daemon -H fd:// -s devicemapper --storage-driver=aufs
MountFlags=slave
"""


def exec_line(text):
    return next(line for line in text.splitlines() if line.startswith("ExecStart="))


def test_patch_replaces_every_driver_flag():
    patched = system.patch_storage_driver(UNIT, "overlay")
    assert exec_line(patched) == "ExecStart=/usr/bin/docker daemon --storage-driver=overlay -H fd://"
    assert "MountFlags=slave" in patched


@pytest.mark.parametrize("line", [
    "ExecStart=/usr/bin/dockerd -H fd://",
    "ExecStart=/usr/bin/dockerd -s=btrfs -H fd://",
    "ExecStart=/usr/bin/dockerd   --storage-driver  btrfs -H fd://",
])
def test_patch_dockerd_variants(line):
    patched = system.patch_storage_driver(line + "\n", "overlay")
    assert patched == "ExecStart=/usr/bin/dockerd --storage-driver=overlay -H fd://\n"


def test_patch_is_idempotent():
    once = system.patch_storage_driver(UNIT, "overlay")
    assert system.patch_storage_driver(once, "overlay") == once


def test_patch_without_docker_line_fails():
    with pytest.raises(RuntimeUnitError):
        system.patch_storage_driver("[Service]\nExecStart=/bin/true\n", "overlay")


def test_ensure_storage_driver_restarts_only_on_change(settings, recorder):
    unit = settings.docker_unit_paths[0]
    unit.write_text(UNIT)

    assert system.ensure_storage_driver(settings, "overlay", run=recorder)
    assert recorder.commands == [["systemctl", "daemon-reload"], ["systemctl", "restart", "docker"]]

    recorder.calls.clear()
    assert not system.ensure_storage_driver(settings, "overlay", run=recorder)
    assert recorder.commands == []


def test_ensure_storage_driver_missing_unit(settings, recorder):
    with pytest.raises(RuntimeUnitError):
        system.ensure_storage_driver(settings, "overlay", run=recorder)


def test_ensure_swap_creates_and_registers(settings, recorder):
    settings.fstab_path.write_text("proc /proc proc defaults 0 0\n")
    assert system.ensure_swap(settings, run=recorder)
    assert [cmd[0] for cmd in recorder.commands] == ["dd", "chmod", "mkswap", "swapon"]
    assert settings.fstab_path.read_text().splitlines()[-1] == f"{settings.swap_file} none swap defaults 0 0"


def test_ensure_swap_skips_existing(settings, recorder):
    settings.swap_file.write_text("")
    assert not system.ensure_swap(settings, run=recorder)
    assert recorder.commands == []
    assert not settings.fstab_path.exists()


def test_set_hostname_skips_when_unchanged(monkeypatch, recorder):
    monkeypatch.setattr(system, "current_hostname", lambda: "black-pearl")
    assert not system.set_hostname("black-pearl", run=recorder)
    assert system.set_hostname("kube-master", run=recorder)
    assert recorder.commands == [["hostnamectl", "set-hostname", "kube-master"]]


def test_patch_keeps_exec_line_indentation():
    unit = "[Service]\n    ExecStart=/usr/bin/dockerd -s aufs -H fd://\n"
    patched = system.patch_storage_driver(unit, "overlay")
    assert patched == "[Service]\n    ExecStart=/usr/bin/dockerd --storage-driver=overlay -H fd://\n"
