"""Node role and liveness, read from the docker engine.

The running containers are the source of truth: the orchestration
scripts run the kubelet as a container, and the kubelet runs the
control-plane components as containers on a master.
"""
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

import docker
from docker.errors import DockerException

logger = logging.getLogger("kubearmctl.node")

KUBELET = "kubelet"
PROXY = "proxy"
APISERVER = "apiserver"
CONTROLLER_MANAGER = "controller-manager"
SCHEDULER = "scheduler"


class NodeRole(str, Enum):
    """Node roles derived from running containers."""
    MASTER = 'master'
    WORKER = 'worker'
    NONE = 'none'


def derive_role(names: Iterable[str]) -> NodeRole:
    names = list(names)
    has_kubelet = any(KUBELET in n for n in names)
    if not has_kubelet:
        return NodeRole.NONE
    if any(APISERVER in n for n in names):
        return NodeRole.MASTER
    return NodeRole.WORKER


def running_containers(client=None) -> List:
    """Running containers, or an empty list if docker is unreachable."""
    try:
        client = client or docker.from_env()
        return client.containers.list()
    except DockerException as e:
        logger.debug(f"Docker engine unavailable: {e}")
        return []


def get_node_role(client=None) -> NodeRole:
    return derive_role(c.name for c in running_containers(client))


def is_active(client=None) -> bool:
    """True if a kubelet is running on this node."""
    return get_node_role(client) is not NodeRole.NONE


def find_container(containers: Iterable, component: str):
    return next((c for c in containers if component in c.name), None)


def process_cpu_minutes(pid: int, proc_root: Path = Path("/proc")) -> Optional[float]:
    """Accumulated user+system CPU time of a process in minutes."""
    try:
        stat = (proc_root / str(pid) / "stat").read_text()
    except OSError:
        return None
    # comm may contain spaces; fields after it are space separated
    fields = stat.rsplit(")", 1)[-1].split()
    try:
        utime, stime = int(fields[11]), int(fields[12])
    except (IndexError, ValueError):
        return None
    ticks = os.sysconf("SC_CLK_TCK")
    return round((utime + stime) / ticks / 60, 2)


def container_cpu_minutes(container, proc_root: Path = Path("/proc")) -> Optional[float]:
    if container is None:
        return None
    pid = container.attrs.get("State", {}).get("Pid")
    if not pid:
        return None
    return process_cpu_minutes(pid, proc_root)
