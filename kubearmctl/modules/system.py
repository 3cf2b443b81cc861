"""Local OS configuration steps run by the installer.

Each step checks the current state first so a rerun is cheap.
"""
import logging
import socket
from pathlib import Path
from typing import Callable, List, Optional

from kubearmctl.config import Settings
from kubearmctl.errors import RuntimeUnitError
from kubearmctl.utils import command_output, run_command

logger = logging.getLogger("kubearmctl.system")

STORAGE_DRIVER_FLAGS = ("-s", "--storage-driver")


def current_hostname() -> str:
    return socket.gethostname()


def set_hostname(name: str, run: Callable = run_command) -> bool:
    """Set the hostname; returns False if it was already set."""
    if name == current_hostname():
        logger.info(f"✅ Hostname already {name}")
        return False
    logger.info(f"🔧 Setting hostname to {name}")
    run(["hostnamectl", "set-hostname", name])
    return True


def current_timezone() -> Optional[str]:
    return command_output(["timedatectl", "show", "-p", "Timezone", "--value"])


def set_timezone(timezone: str, run: Callable = run_command) -> bool:
    if timezone == current_timezone():
        logger.info(f"✅ Timezone already {timezone}")
        return False
    logger.info(f"🕒 Setting timezone to {timezone}")
    run(["timedatectl", "set-timezone", timezone])
    return True


def find_docker_unit(settings: Settings) -> Path:
    for path in settings.docker_unit_paths:
        if Path(path).is_file():
            return Path(path)
    raise RuntimeUnitError(
        "❌ Docker service unit not found in: "
        + ", ".join(str(p) for p in settings.docker_unit_paths)
    )


def _binary_index(tokens: List[str]) -> Optional[int]:
    """Index of the last token of the docker daemon invocation."""
    for i, token in enumerate(tokens):
        if token.endswith("dockerd"):
            return i
        if token.endswith("docker"):
            if i + 1 < len(tokens) and tokens[i + 1] == "daemon":
                return i + 1
            return i
    return None


def _strip_storage_flags(tokens: List[str]) -> List[str]:
    kept = []
    skip_next = False
    for token in tokens:
        if skip_next:
            skip_next = False
            continue
        if token in STORAGE_DRIVER_FLAGS:
            skip_next = True
            continue
        if any(token.startswith(flag + "=") for flag in STORAGE_DRIVER_FLAGS):
            continue
        kept.append(token)
    return kept


def patch_storage_driver(unit_text: str, driver: str) -> str:
    """Return the unit text with exactly one ``--storage-driver=<driver>``.

    Every short or long storage-driver flag on the docker ``ExecStart=``
    line is dropped, then a single long flag is inserted right after the
    daemon invocation. Applying it twice gives the same result.
    """
    lines = unit_text.splitlines(keepends=True)
    for n, line in enumerate(lines):
        stripped = line.strip()
        if not stripped.startswith("ExecStart="):
            continue
        tokens = stripped[len("ExecStart="):].split()
        idx = _binary_index(tokens)
        if idx is None:
            continue
        tokens = _strip_storage_flags(tokens)
        idx = _binary_index(tokens)
        tokens.insert(idx + 1, f"--storage-driver={driver}")
        indent = line[:len(line) - len(line.lstrip())]
        ending = "\n" if line.endswith("\n") else ""
        lines[n] = indent + "ExecStart=" + " ".join(tokens) + ending
        return "".join(lines)
    raise RuntimeUnitError("❌ No docker ExecStart= line found in the service unit")


def ensure_storage_driver(settings: Settings, driver: str, run: Callable = run_command) -> bool:
    """Make docker use ``driver``; restarts docker only if the unit changed."""
    unit = find_docker_unit(settings)
    original = unit.read_text()
    patched = patch_storage_driver(original, driver)
    if patched == original:
        logger.info(f"✅ Docker already uses storage driver {driver}")
        return False
    logger.info(f"💾 Switching docker storage driver to {driver} in {unit}")
    unit.write_text(patched)
    run(["systemctl", "daemon-reload"])
    run(["systemctl", "restart", "docker"])
    return True


def ensure_swap(settings: Settings, run: Callable = run_command) -> bool:
    """Create, enable and register a swap file unless one already exists."""
    swap_file = settings.swap_file
    if swap_file.exists():
        logger.info(f"✅ Swap file {swap_file} already exists")
        return False

    logger.info(f"💽 Creating {settings.swap_size_mb}MB swap file at {swap_file}")
    run(["dd", "if=/dev/zero", f"of={swap_file}", "bs=1M", f"count={settings.swap_size_mb}"])
    run(["chmod", "600", str(swap_file)])
    run(["mkswap", str(swap_file)])
    run(["swapon", str(swap_file)])

    with open(settings.fstab_path, "a") as f:
        f.write(f"{swap_file} none swap defaults 0 0\n")
    return True
