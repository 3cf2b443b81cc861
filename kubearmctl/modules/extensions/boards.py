"""Single-board computer extensions."""
from pathlib import Path

from . import register_board
from .base import Extension, HookContext

CGROUP_FLAGS = ("cgroup_enable=cpuset", "cgroup_enable=memory")


class RaspberryPi(Extension):
    """Raspberry Pi family: enable memory cgroups and shrink the GPU split."""

    cmdline_path = Path("/boot/cmdline.txt")
    config_txt_path = Path("/boot/config.txt")
    gpu_mem = 16

    def post_install(self, ctx: HookContext) -> None:
        if self.cmdline_path.exists():
            cmdline = self.cmdline_path.read_text().strip()
            missing = [flag for flag in CGROUP_FLAGS if flag not in cmdline.split()]
            if missing:
                self.logger.info(f"🔧 Enabling kernel cgroups: {' '.join(missing)}")
                self.cmdline_path.write_text(" ".join([cmdline] + missing) + "\n")
        else:
            self.logger.warning(f"⚠️  {self.cmdline_path} not found, cgroups left untouched")

        if self.config_txt_path.exists():
            lines = self.config_txt_path.read_text().splitlines()
            if not any(line.startswith("gpu_mem=") for line in lines):
                self.logger.info(f"🔧 Setting gpu_mem={self.gpu_mem}")
                lines.append(f"gpu_mem={self.gpu_mem}")
                self.config_txt_path.write_text("\n".join(lines) + "\n")


@register_board("rpi")
class RPi(RaspberryPi):
    pass


@register_board("rpi-2")
class RPi2(RaspberryPi):
    pass


@register_board("rpi-3")
class RPi3(RaspberryPi):
    pass


@register_board("odroid-c2")
class OdroidC2(Extension):
    pass


@register_board("pine64")
class Pine64(Extension):
    pass
