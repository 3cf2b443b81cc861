import pytest

from kubearmctl.config import Settings


class Recorder:
    """Stands in for run_command and remembers every call."""

    def __init__(self):
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((list(cmd), kwargs))

    @property
    def commands(self):
        return [cmd for cmd, _ in self.calls]


@pytest.fixture
def settings(tmp_path):
    config_dir = tmp_path / "etc-kubernetes"
    config_dir.mkdir()
    unit = tmp_path / "docker.service"
    return Settings(
        config_dir=config_dir,
        bin_dir=tmp_path / "bin",
        docker_unit_paths=(unit,),
        swap_file=tmp_path / "swapfile",
        fstab_path=tmp_path / "fstab",
    )


@pytest.fixture
def store_file(settings):
    settings.config_file.write_text("K8S_VERSION=v1.3.6\nMASTER_IP=10.0.0.1\n")
    return settings.config_file


@pytest.fixture
def recorder():
    return Recorder()


class FakeContainer:
    def __init__(self, name, pid=0):
        self.name = name
        self.attrs = {"State": {"Pid": pid}}


class FakeDockerClient:
    """Just enough of docker.DockerClient for containers.list()."""

    def __init__(self, names):
        self.containers = self
        self._names = names

    def list(self):
        return [FakeContainer(n) for n in self._names]


MASTER_CONTAINERS = [
    "kube_kubelet_a1b2c",
    "k8s_apiserver.3a1f_k8s-master-10.0.0.1_kube-system",
    "k8s_kube-proxy.71e2_k8s-proxy-10.0.0.1_kube-system",
]


@pytest.fixture
def docker_client():
    return FakeDockerClient


@pytest.fixture
def master_containers():
    return list(MASTER_CONTAINERS)
