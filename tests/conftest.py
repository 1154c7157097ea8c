"""Fake Kubernetes APIs patched into nine_cli for tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple

import pytest
from kubernetes.client import ApiException, Configuration

from nine_cli import cli, render, status

NOW = datetime.now(timezone.utc)


def replica_workload(name: str, ready: Optional[int], desired: Optional[int], age: timedelta = timedelta(hours=3)):
    """Object shaped like V1StatefulSet / V1Deployment."""
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, creation_timestamp=NOW - age),
        spec=SimpleNamespace(replicas=desired),
        status=SimpleNamespace(ready_replicas=ready),
    )


def pg_cluster(name: str, ready: Optional[int], instances: Optional[int]) -> Dict[str, Any]:
    status_ = {} if ready is None else {"readyInstances": ready}
    spec = {} if instances is None else {"instances": instances}
    return {
        "metadata": {"name": name, "creationTimestamp": "2024-01-01T00:00:00Z"},
        "spec": spec,
        "status": status_,
    }


def nine_cluster(name: str, namespace: str = "dw", data_volume: int = 100) -> Dict[str, Any]:
    return {
        "metadata": {
            "name": name,
            "namespace": namespace,
            "creationTimestamp": (NOW - timedelta(days=3)).strftime("%Y-%m-%dT%H:%M:%SZ"),
        },
        "spec": {"dataVolume": data_volume},
    }


def service(name: str, svc_type: str, cluster_ip: str, ports: List[Tuple[str, int, Optional[int]]]):
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name),
        spec=SimpleNamespace(
            type=svc_type,
            cluster_ip=cluster_ip,
            ports=[SimpleNamespace(name=n, port=p, node_port=np) for n, p, np in ports],
        ),
    )


def _lookup(store: Dict[Tuple[str, str], Any], errors: Dict[Tuple[str, str], int], namespace: str, name: str):
    key = (namespace, name)
    if key in errors:
        raise ApiException(status=errors[key], reason="Internal Server Error")
    if key not in store:
        raise ApiException(status=404, reason="Not Found")
    return store[key]


class FakeCluster:
    """In-memory stand-in for the API server, keyed by (namespace, name)."""

    def __init__(self) -> None:
        self.statefulsets: Dict[Tuple[str, str], Any] = {}
        self.deployments: Dict[Tuple[str, str], Any] = {}
        self.services: Dict[Tuple[str, str], Any] = {}
        self.pg_clusters: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.nine_clusters: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.errors: Dict[Tuple[str, str], int] = {}
        self.releases: set = set()
        self.host = "https://192.168.10.5:6443"
        self.calls: List[Tuple[str, str, str]] = []
        self.deleted: List[Tuple[str, str]] = []

    # apps/v1
    def read_namespaced_stateful_set(self, name: str, namespace: str):
        self.calls.append(("statefulset", namespace, name))
        return _lookup(self.statefulsets, self.errors, namespace, name)

    def read_namespaced_deployment(self, name: str, namespace: str):
        self.calls.append(("deployment", namespace, name))
        return _lookup(self.deployments, self.errors, namespace, name)

    # core/v1
    def read_namespaced_service(self, name: str, namespace: str):
        return _lookup(self.services, self.errors, namespace, name)

    def kube_clients(self, kubeconfig=None):
        return SimpleNamespace(core=self, apps=self)

    def kube_clients_with_config(self, kubeconfig=None):
        configuration = Configuration()
        configuration.host = self.host
        return self.kube_clients(kubeconfig), configuration

    def pg_client(self, kubeconfig=None):
        return FakeCustomClient(self, self.pg_clusters, "cluster")

    def nine_client(self, kubeconfig=None):
        return FakeCustomClient(self, self.nine_clusters, "ninecluster")


class FakeCustomClient:
    def __init__(self, owner: FakeCluster, store: Dict[Tuple[str, str], Dict[str, Any]], kind: str) -> None:
        self.owner = owner
        self.store = store
        self.kind = kind

    def get(self, namespace: str, name: str) -> Dict[str, Any]:
        self.owner.calls.append((self.kind, namespace, name))
        return _lookup(self.store, self.owner.errors, namespace, name)

    def list(self, namespace: Optional[str] = None) -> List[Dict[str, Any]]:
        return [obj for (ns, _), obj in sorted(self.store.items()) if namespace is None or ns == namespace]

    def delete(self, namespace: str, name: str) -> Dict[str, Any]:
        obj = _lookup(self.store, self.owner.errors, namespace, name)
        del self.store[(namespace, name)]
        self.owner.deleted.append((namespace, name))
        return obj


@pytest.fixture
def fake_cluster(monkeypatch: pytest.MonkeyPatch) -> FakeCluster:
    """Patch every client constructor used by nine_cli with one FakeCluster."""
    fake = FakeCluster()
    monkeypatch.setattr(status, "get_kube_client", fake.kube_clients)
    monkeypatch.setattr(status, "get_kube_client_with_config", fake.kube_clients_with_config)
    monkeypatch.setattr(status, "get_pg_operator_client", fake.pg_client)
    monkeypatch.setattr(status, "get_nine_client", fake.nine_client)
    monkeypatch.setattr(cli, "get_nine_client", fake.nine_client)
    monkeypatch.setattr(
        render, "release_exists", lambda release, namespace, kubeconfig=None: (namespace, release) in fake.releases
    )
    return fake
