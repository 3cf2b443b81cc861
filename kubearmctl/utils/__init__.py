"""Utility functions and helpers for the kubearmctl application."""
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

import requests

logger = logging.getLogger("kubearmctl.utils")


def run_command(
    cmd: List[str],
    *,
    check: bool = True,
    capture_output: bool = False,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Dict[str, str]] = None,
    input_text: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """Run an external command synchronously.

    Args:
        cmd: Command and arguments
        check: Raise CalledProcessError on a non-zero exit status
        capture_output: Capture stdout/stderr instead of inheriting them
        cwd: Working directory for the command
        env: Extra environment variables, merged over os.environ
        input_text: Text written to the command's stdin

    Returns:
        The completed process
    """
    cmd_str = ' '.join(str(c) for c in cmd)
    logger.debug(f"💻 Running: {cmd_str}")
    try:
        result = subprocess.run(
            [str(c) for c in cmd],
            check=check,
            text=True,
            cwd=str(cwd) if cwd else None,
            env=dict(os.environ, **env) if env else None,
            input=input_text,
            stdout=subprocess.PIPE if capture_output else None,
            stderr=subprocess.PIPE if capture_output else None,
        )
        if capture_output:
            logger.debug(f"🟢 Output:\n{result.stdout}")
        return result
    except subprocess.CalledProcessError as e:
        msg = f"❌ Command failed: {cmd_str} (exit code: {e.returncode})"
        if capture_output:
            msg += f"\nStdout:\n{e.stdout}\nStderr:\n{e.stderr}"
        logger.error(msg)
        raise


def command_exists(name: str) -> bool:
    return shutil.which(name) is not None


def command_output(cmd: List[str]) -> Optional[str]:
    """Return stripped stdout of a command, or None if it is missing or fails."""
    if not command_exists(cmd[0]):
        return None
    try:
        result = subprocess.run(cmd, check=True, text=True, capture_output=True)
    except (subprocess.CalledProcessError, OSError) as e:
        logger.debug(f"Command {cmd[0]} unavailable: {e}")
        return None
    return result.stdout.strip()


def download_file(url: str, dest: Union[str, Path], mode: Optional[int] = None) -> Path:
    """Stream a URL to a local file.

    Args:
        url: HTTP(S) URL to fetch
        dest: Destination path; parent directories are created
        mode: Optional permission bits applied after the download

    Returns:
        Path of the written file

    Raises:
        requests.HTTPError: If the server answers with an error status
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"⬇️  Downloading {url}")
    with requests.get(url, stream=True) as response:
        response.raise_for_status()
        with open(dest, "wb") as f:
            for chunk in response.iter_content(chunk_size=64 * 1024):
                if chunk:
                    f.write(chunk)
    if mode is not None:
        os.chmod(dest, mode)
    logger.debug(f"Wrote {dest}")
    return dest
