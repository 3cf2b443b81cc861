"""Bring this node into or out of a cluster.

Cluster formation itself is done by the orchestration project's
scripts; this module checks the one precondition it can (a reachable
master before a worker joins) and remembers the master address.
"""
import logging
import shutil
from pathlib import Path
from typing import Callable, List, Optional

import requests

from kubearmctl.config import Settings
from kubearmctl.errors import MasterNotFoundError
from kubearmctl.modules.config_store import ConfigStore
from kubearmctl.utils import run_command

logger = logging.getLogger("kubearmctl.lifecycle")

MASTER_IP_KEY = "MASTER_IP"
WORKER_USAGE = "Usage: kubearmctl enable-worker [master-ip]"

DATA_DIRS = [
    Path("/var/lib/kubelet"),
    Path("/var/lib/kubernetes-etcd"),
]


def probe_master(ip: str, port: int = 8080, timeout: float = 5.0) -> bool:
    """HEAD the master's API port once and look for ``OK`` in the answer."""
    url = f"http://{ip}:{port}"
    try:
        response = requests.head(url, timeout=timeout)
    except requests.RequestException as e:
        logger.debug(f"Probe of {url} failed: {e}")
        return False
    headers = "\n".join(f"{k}: {v}" for k, v in response.headers.items())
    answer = f"{response.status_code} {response.reason}\n{headers}\n{response.text}"
    return "OK" in answer


def _run_script(settings: Settings, script: str, env: dict, run: Callable) -> None:
    workdir = settings.multinode_dir
    logger.info(f"▶️  Running {script} in {workdir}")
    run([f"./{script}"], cwd=workdir, env=env)


def enable_master(settings: Settings, run: Callable = run_command) -> None:
    logger.info("👑 Enabling this node as master")
    _run_script(settings, "master.sh", {"K8S_VERSION": settings.k8s_version}, run)
    logger.info("✅ Master enabled.")


def enable_worker(
    settings: Settings,
    store: ConfigStore,
    master_ip: Optional[str] = None,
    run: Callable = run_command,
    probe: Callable = probe_master,
) -> str:
    """Join this node to the master at ``master_ip`` (or the remembered one).

    Returns the master IP used.
    """
    master_ip = master_ip or store.get(MASTER_IP_KEY)
    if not master_ip:
        raise MasterNotFoundError(f"❌ No master IP given and none remembered.\n{WORKER_USAGE}")

    store.set(MASTER_IP_KEY, master_ip)

    logger.info(f"🔍 Checking master at {master_ip}:{settings.master_port}")
    if not probe(master_ip, port=settings.master_port, timeout=settings.probe_timeout):
        raise MasterNotFoundError(
            f"❌ Kubernetes master not found at {master_ip}:{settings.master_port}.\n{WORKER_USAGE}"
        )

    logger.info(f"👷 Joining master {master_ip}")
    _run_script(
        settings,
        "worker.sh",
        {"MASTER_IP": master_ip, "K8S_VERSION": settings.k8s_version},
        run,
    )
    logger.info("✅ Worker enabled.")
    return master_ip


def disable(settings: Settings, run: Callable = run_command) -> None:
    logger.info("🛑 Turning down Kubernetes on this node")
    _run_script(settings, "turndown.sh", {}, run)
    logger.info("✅ Node disabled.")


def delete_data(data_dirs: Optional[List[Path]] = None) -> List[Path]:
    """Remove kubelet and etcd state left behind after ``disable``."""
    removed = []
    for path in data_dirs or DATA_DIRS:
        if path.exists():
            logger.info(f"🧹 Removing {path}")
            shutil.rmtree(path)
            removed.append(path)
        else:
            logger.debug(f"🔍 Not found (skipped): {path}")
    return removed
