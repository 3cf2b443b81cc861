"""One-shot node preparation.

The installer walks a fixed sequence of phases. There is no resume:
any failure propagates to the CLI, and rerunning the command repeats
every phase from the start.
"""
import logging
import os
import platform
import shutil
import tarfile
import tempfile
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import typer

from kubearmctl.config import Settings
from kubearmctl.errors import KubearmError
from kubearmctl.modules import system
from kubearmctl.modules.environment import EnvironmentProfile
from kubearmctl.modules.extensions import Extension, HookContext, has_hook
from kubearmctl.utils import command_exists, download_file, run_command

logger = logging.getLogger("kubearmctl.installer")

DEFAULT_STORAGE_DRIVER = "overlay"


class InstallPhase(str, Enum):
    """Phases of a node install."""
    START = 'start'
    RUNTIME_PREPARED = 'runtime_prepared'
    CONFIG_FETCHED = 'config_fetched'
    BINARIES_FETCHED = 'binaries_fetched'
    CONFIGURED = 'configured'
    REBOOTED = 'rebooted'
    DONE = 'done'


def go_arch(machine: Optional[str] = None) -> str:
    """Map the kernel machine name to the release architecture name."""
    machine = (machine or platform.machine()).lower()
    if machine in ("aarch64", "arm64"):
        return "arm64"
    if machine.startswith("arm"):
        return "arm"
    if machine in ("x86_64", "amd64"):
        return "amd64"
    return machine


class Installer:
    """Prepares a node for enable-master / enable-worker."""

    def __init__(
        self,
        settings: Settings,
        profile: EnvironmentProfile,
        hooks: Tuple[Extension, Extension],
        run: Callable = run_command,
        prompt: Callable = typer.prompt,
        confirm: Callable = typer.confirm,
    ):
        self.settings = settings
        self.profile = profile
        self.board, self.os = hooks
        self.run = run
        self.prompt = prompt
        self.confirm = confirm
        self.phase = InstallPhase.START
        self.history: List[InstallPhase] = [self.phase]

    def _advance(self, phase: InstallPhase) -> None:
        self.phase = phase
        self.history.append(phase)
        logger.debug(f"Install phase: {phase.value}")

    def _call_hooks(self, hook: str, extensions: List[Extension]) -> None:
        ctx = HookContext(settings=self.settings, run=self.run)
        for ext in extensions:
            if has_hook(ext, hook):
                logger.info(f"🔌 Running {ext.name} {hook}")
                getattr(ext, hook)(ctx)

    def run_all(self) -> InstallPhase:
        logger.info(f"🚀 Installing node ({self.profile.board} / {self.profile.os})")
        self.prepare_runtime()
        self.fetch_orchestration()
        self.fetch_binaries()
        self.configure()
        if self.maybe_reboot():
            return self.phase
        self._advance(InstallPhase.DONE)
        logger.info("✅ Install complete.")
        return self.phase

    def prepare_runtime(self) -> None:
        cfg = self.settings
        cfg.config_dir.mkdir(parents=True, exist_ok=True)
        if not cfg.config_file.exists():
            logger.info(f"📝 Creating config store {cfg.config_file}")
            cfg.config_file.touch()
        self._call_hooks("pre_install", [self.os, self.board])
        self._advance(InstallPhase.RUNTIME_PREPARED)

    def fetch_orchestration(self) -> None:
        """Fetch the orchestration project at its pinned revision.

        Without git the unpinned master archive is used instead.
        """
        cfg = self.settings
        target = cfg.kube_deploy_dir
        if command_exists("git"):
            logger.info(f"📥 Cloning {cfg.kube_deploy_repo} at {cfg.kube_deploy_commit}")
            self.run(["git", "clone", cfg.kube_deploy_repo, str(target)])
            self.run(["git", "checkout", cfg.kube_deploy_commit], cwd=target)
        elif target.exists():
            raise KubearmError(
                f"❌ {target} already exists; remove it before fetching the orchestration project again"
            )
        else:
            logger.warning(
                f"⚠️  git not found, downloading the unpinned master archive "
                f"instead of {cfg.kube_deploy_commit}"
            )
            self._download_archive(f"{cfg.kube_deploy_repo}/archive/master.tar.gz", target)
        self._advance(InstallPhase.CONFIG_FETCHED)

    def _download_archive(self, url: str, target: Path) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            archive = download_file(url, Path(tmp) / "source.tar.gz")
            with tarfile.open(archive) as tar:
                if hasattr(tarfile, "data_filter"):
                    tar.extractall(tmp, filter="data")
                else:
                    tar.extractall(tmp)
            extracted = [p for p in Path(tmp).iterdir() if p.is_dir()]
            if len(extracted) != 1:
                raise RuntimeError(f"Unexpected archive layout from {url}")
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(extracted[0]), str(target))

    def fetch_binaries(self) -> None:
        cfg = self.settings
        arch = go_arch()

        kubectl_url = cfg.kubectl_url.format(version=cfg.k8s_version, arch=arch)
        download_file(kubectl_url, cfg.bin_dir / "kubectl", mode=0o755)

        helm_url = cfg.helm_url.format(version=cfg.helm_version, arch=arch)
        if helm_url.endswith((".tar.gz", ".tgz")):
            self._install_from_tarball(helm_url, "helm")
        else:
            download_file(helm_url, cfg.bin_dir / "helm", mode=0o755)
        self._advance(InstallPhase.BINARIES_FETCHED)

    def _install_from_tarball(self, url: str, binary: str) -> None:
        dest = self.settings.bin_dir / binary
        with tempfile.TemporaryDirectory() as tmp:
            archive = download_file(url, Path(tmp) / f"{binary}.tar.gz")
            with tarfile.open(archive) as tar:
                member = next((m for m in tar.getmembers() if Path(m.name).name == binary and m.isfile()), None)
                if member is None:
                    raise RuntimeError(f"{binary} not found in {url}")
                src = tar.extractfile(member)
                dest.parent.mkdir(parents=True, exist_ok=True)
                with open(dest, "wb") as out:
                    shutil.copyfileobj(src, out)
        os.chmod(dest, 0o755)
        logger.info(f"✅ Installed {dest}")

    def configure(self) -> None:
        cfg = self.settings

        hostname = cfg.new_hostname
        if hostname is None:
            hostname = self.prompt("Hostname", default=system.current_hostname())
        if hostname:
            system.set_hostname(hostname, run=self.run)

        timezone = cfg.timezone
        if timezone is None:
            timezone = self.prompt("Timezone", default=system.current_timezone() or "UTC")
        if timezone:
            system.set_timezone(timezone, run=self.run)

        driver = cfg.storage_driver
        if driver is None:
            driver = self.prompt("Docker storage driver", default=DEFAULT_STORAGE_DRIVER)
        if driver:
            system.ensure_storage_driver(cfg, driver, run=self.run)

        swap = cfg.swap
        if swap is None:
            swap = self.confirm(f"Create a {cfg.swap_size_mb}MB swap file?", default=False)
        if swap:
            system.ensure_swap(cfg, run=self.run)

        self._call_hooks("post_install", [self.board, self.os])
        self._advance(InstallPhase.CONFIGURED)

    def maybe_reboot(self) -> bool:
        reboot = self.settings.reboot
        if reboot is None:
            reboot = self.confirm("Reboot now?", default=True)
        if not reboot:
            logger.info("ℹ️  Skipping reboot; reboot before enabling the node.")
            return False
        self._advance(InstallPhase.REBOOTED)
        logger.info("🔁 Rebooting...")
        self.run(["reboot"])
        return True
