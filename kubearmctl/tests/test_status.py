from kubearmctl.modules import status
from kubearmctl.modules.node import NodeRole


def test_memory_mb(tmp_path):
    meminfo = tmp_path / "meminfo"
    meminfo.write_text("MemTotal:        1024000 kB\nMemFree:          100000 kB\nMemAvailable:     512000 kB\n")
    assert status.memory_mb(meminfo) == {"used": 500, "free": 500}


def test_missing_sources_are_empty(tmp_path):
    assert status.memory_mb(tmp_path / "nope") == {"used": None, "free": None}
    assert status.max_cpu_mhz(tmp_path / "nope") is None


def test_max_cpu_mhz(tmp_path):
    freq = tmp_path / "freq"
    freq.write_text("1200000\n")
    assert status.max_cpu_mhz(freq) == 1200


def test_collect_info_offline_cluster(settings, monkeypatch, docker_client):
    monkeypatch.setattr(status, "server_version", lambda api: None)
    monkeypatch.setattr(status, "docker_version", lambda client=None: None)
    info = status.collect_info(settings, docker_client=docker_client([]))

    assert info["Kubernetes"] == settings.k8s_version
    assert info["Node role"] == NodeRole.NONE.value
    assert info["Build metadata"] is None
    assert info["Docker"] is None
    assert not any(key.startswith("CPU time") for key in info)


def test_collect_info_master_reports_control_plane(settings, monkeypatch, docker_client, master_containers):
    monkeypatch.setattr(status, "server_version", lambda api: "v1.3.6")
    monkeypatch.setattr(status, "docker_version", lambda client=None: "1.12.1")
    settings.build_metadata_file.write_text("HYPRIOT_IMAGE_VERSION=v1.0.0")
    info = status.collect_info(settings, docker_client=docker_client(master_containers))

    assert info["Node role"] == "master"
    assert info["Build metadata"] == "HYPRIOT_IMAGE_VERSION=v1.0.0"
    for component in ("kubelet", "proxy", "apiserver", "controller-manager", "scheduler"):
        assert f"CPU time {component}" in info


def test_collect_info_worker_skips_control_plane(settings, monkeypatch, docker_client):
    monkeypatch.setattr(status, "server_version", lambda api: "v1.3.6")
    monkeypatch.setattr(status, "docker_version", lambda client=None: None)
    info = status.collect_info(settings, docker_client=docker_client(["kube_kubelet_x"]))

    assert "CPU time kubelet" in info
    assert "CPU time apiserver" not in info
