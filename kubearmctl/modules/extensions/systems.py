"""Operating system extensions: container runtime and tooling install."""
import tempfile
from pathlib import Path

from kubearmctl.utils import command_exists, download_file

from . import register_os
from .base import Extension, HookContext

DOCKER_INSTALL_SCRIPT = "https://get.docker.com"


@register_os("hypriotos")
class HypriotOS(Extension):
    """HypriotOS ships docker; only git is missing."""

    def pre_install(self, ctx: HookContext) -> None:
        if not command_exists("git"):
            ctx.run(["apt-get", "update"])
            ctx.run(["apt-get", "install", "-y", "git"])
        ctx.run(["systemctl", "enable", "docker"])


@register_os("archlinux")
class ArchLinux(Extension):

    def pre_install(self, ctx: HookContext) -> None:
        self.logger.info("📦 Installing docker and git with pacman")
        ctx.run(["pacman", "-Sy", "--noconfirm", "--needed", "docker", "git"])
        ctx.run(["systemctl", "enable", "--now", "docker"])


@register_os("raspbian")
class Raspbian(Extension):

    def pre_install(self, ctx: HookContext) -> None:
        ctx.run(["apt-get", "update"])
        ctx.run(["apt-get", "install", "-y", "git", "curl"])
        if not command_exists("docker"):
            self.logger.info("📦 Installing docker from get.docker.com")
            with tempfile.TemporaryDirectory() as tmp:
                script = download_file(DOCKER_INSTALL_SCRIPT, Path(tmp) / "get-docker.sh")
                ctx.run(["sh", str(script)])
        ctx.run(["systemctl", "enable", "--now", "docker"])

    def post_install(self, ctx: HookContext) -> None:
        # dphys-swapfile would fight with our own /swapfile
        if command_exists("dphys-swapfile"):
            ctx.run(["dphys-swapfile", "swapoff"], check=False)
            ctx.run(["systemctl", "disable", "dphys-swapfile"], check=False)
