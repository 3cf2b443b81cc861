import pytest
import requests

from kubearmctl.errors import MasterNotFoundError
from kubearmctl.modules import lifecycle
from kubearmctl.modules.config_store import ConfigStore


class FakeResponse:
    def __init__(self, status_code=200, reason="OK", text="", headers=None):
        self.status_code = status_code
        self.reason = reason
        self.text = text
        self.headers = headers or {}


def test_probe_accepts_ok(monkeypatch):
    seen = {}

    def fake_head(url, timeout):
        seen.update(url=url, timeout=timeout)
        return FakeResponse()

    monkeypatch.setattr(lifecycle.requests, "head", fake_head)
    assert lifecycle.probe_master("192.168.1.10")
    assert seen == {"url": "http://192.168.1.10:8080", "timeout": 5.0}


def test_probe_rejects_other_answers(monkeypatch):
    monkeypatch.setattr(
        lifecycle.requests, "head",
        lambda url, timeout: FakeResponse(status_code=404, reason="Not Found"),
    )
    assert not lifecycle.probe_master("192.168.1.10")


@pytest.mark.parametrize("error", [requests.ConnectTimeout, requests.ConnectionError])
def test_probe_unreachable(monkeypatch, error):
    def fake_head(url, timeout):
        raise error("nope")

    monkeypatch.setattr(lifecycle.requests, "head", fake_head)
    assert not lifecycle.probe_master("192.168.1.10")


def test_enable_worker_joins_live_master(settings, store_file, recorder):
    store = ConfigStore.open(store_file)
    ip = lifecycle.enable_worker(settings, store, "192.168.1.20", run=recorder, probe=lambda *a, **k: True)

    assert ip == "192.168.1.20"
    assert store.get("MASTER_IP") == "192.168.1.20"
    [(cmd, kwargs)] = recorder.calls
    assert cmd == ["./worker.sh"]
    assert kwargs["cwd"] == settings.multinode_dir
    assert kwargs["env"] == {"MASTER_IP": "192.168.1.20", "K8S_VERSION": settings.k8s_version}


def test_enable_worker_uses_remembered_master(settings, store_file, recorder):
    probed = []

    def probe(ip, port, timeout):
        probed.append((ip, port, timeout))
        return True

    lifecycle.enable_worker(settings, ConfigStore.open(store_file), run=recorder, probe=probe)
    assert probed == [("10.0.0.1", 8080, 5.0)]


def test_enable_worker_aborts_when_master_missing(settings, store_file, recorder):
    store = ConfigStore.open(store_file)
    with pytest.raises(MasterNotFoundError):
        lifecycle.enable_worker(settings, store, "192.168.1.99", run=recorder, probe=lambda *a, **k: False)
    assert recorder.calls == []
    # the address is remembered even though the join failed
    assert store.get("MASTER_IP") == "192.168.1.99"


def test_enable_worker_without_any_master_ip(settings, recorder):
    settings.config_file.write_text("")
    with pytest.raises(MasterNotFoundError):
        lifecycle.enable_worker(settings, ConfigStore.open(settings.config_file), run=recorder)
    assert recorder.calls == []


def test_enable_master_and_disable(settings, recorder):
    lifecycle.enable_master(settings, run=recorder)
    lifecycle.disable(settings, run=recorder)
    assert recorder.commands == [["./master.sh"], ["./turndown.sh"]]
    assert recorder.calls[0][1]["env"] == {"K8S_VERSION": settings.k8s_version}


def test_delete_data(tmp_path):
    kubelet = tmp_path / "kubelet"
    (kubelet / "pods").mkdir(parents=True)
    removed = lifecycle.delete_data([kubelet, tmp_path / "etcd"])
    assert removed == [kubelet]
    assert not kubelet.exists()
