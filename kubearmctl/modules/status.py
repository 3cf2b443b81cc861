"""Read-only node diagnostics for ``kubearmctl info``.

Every field is best-effort: a missing tool, file or process yields
None rather than an error.
"""
import logging
import os
import platform
import shutil
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Optional

import docker
from docker.errors import DockerException
from kubernetes import client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from kubearmctl.config import Settings
from kubearmctl.modules import node
from kubearmctl.utils import command_output

logger = logging.getLogger("kubearmctl.status")

MIB = 1024 * 1024

CPUFREQ_MAX = Path("/sys/devices/system/cpu/cpu0/cpufreq/cpuinfo_max_freq")
MEMINFO = Path("/proc/meminfo")


def _read(path: Path) -> Optional[str]:
    try:
        return path.read_text().strip()
    except OSError:
        return None


def max_cpu_mhz(path: Path = CPUFREQ_MAX) -> Optional[int]:
    value = _read(path)
    return int(value) // 1000 if value and value.isdigit() else None


def memory_mb(path: Path = MEMINFO) -> Dict[str, Optional[int]]:
    """Used and free memory in MB from /proc/meminfo."""
    text = _read(path)
    if not text:
        return {"used": None, "free": None}
    info = {}
    for line in text.splitlines():
        key, _, rest = line.partition(":")
        parts = rest.split()
        if parts and parts[0].isdigit():
            info[key] = int(parts[0])
    total = info.get("MemTotal")
    available = info.get("MemAvailable", info.get("MemFree"))
    if total is None or available is None:
        return {"used": None, "free": None}
    return {"used": (total - available) // 1024, "free": available // 1024}


def disk_mb(path: str = "/") -> Dict[str, Optional[int]]:
    try:
        usage = shutil.disk_usage(path)
    except OSError:
        return {"used": None, "free": None}
    return {"used": usage.used // MIB, "free": usage.free // MIB}


def systemd_version() -> Optional[str]:
    out = command_output(["systemctl", "--version"])
    return out.splitlines()[0] if out else None


def docker_version(docker_client=None) -> Optional[str]:
    try:
        docker_client = docker_client or docker.from_env()
        return docker_client.version().get("Version")
    except DockerException as e:
        logger.debug(f"Docker engine unavailable: {e}")
        return None


def server_version(api_server: str) -> Optional[str]:
    """Git version reported by the API server, or None if it does not answer."""
    configuration = client.Configuration()
    configuration.host = api_server
    try:
        with client.ApiClient(configuration) as api_client:
            info = client.VersionApi(api_client).get_code(_request_timeout=5)
    except (ApiException, HTTPError, OSError) as e:
        logger.debug(f"API server {api_server} not answering: {e}")
        return None
    return info.git_version


def collect_info(settings: Settings, docker_client=None) -> "OrderedDict[str, Any]":
    info: "OrderedDict[str, Any]" = OrderedDict()
    info["Architecture"] = platform.machine() or None
    info["Kernel"] = platform.release() or None
    info["CPU cores"] = os.cpu_count()
    mhz = max_cpu_mhz()
    info["CPU max clock"] = f"{mhz} MHz" if mhz else None

    mem = memory_mb()
    info["Memory used"] = f"{mem['used']} MB" if mem["used"] is not None else None
    info["Memory free"] = f"{mem['free']} MB" if mem["free"] is not None else None
    disk = disk_mb()
    info["Disk used"] = f"{disk['used']} MB" if disk["used"] is not None else None
    info["Disk free"] = f"{disk['free']} MB" if disk["free"] is not None else None

    info["Build metadata"] = _read(settings.build_metadata_file)
    info["systemd"] = systemd_version()
    info["Docker"] = docker_version(docker_client)

    live_version = server_version(settings.api_server)
    info["Kubernetes"] = live_version or settings.k8s_version

    containers = node.running_containers(docker_client)
    role = node.derive_role(c.name for c in containers)
    info["Node role"] = role.value

    if live_version:
        components = [node.KUBELET, node.PROXY]
        if role is node.NodeRole.MASTER:
            components += [node.APISERVER, node.CONTROLLER_MANAGER, node.SCHEDULER]
        for component in components:
            minutes = node.container_cpu_minutes(node.find_container(containers, component))
            info[f"CPU time {component}"] = f"{minutes} min" if minutes is not None else None
    return info
