"""
Readiness and status lookups for NineClusters and their workloads.

Provides the readiness checks (ready count equals desired count) for each
WorkloadKind, the "READY/AGE" strings shown in tables, the lookup of
NineCluster resources, and service access endpoints for tools.

Every call builds its own API client from the kubeconfig path it is given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import urllib3
from kubernetes.client import ApiException

from .clients import (
    get_kube_client,
    get_kube_client_with_config,
    get_nine_client,
    get_pg_operator_client,
    ip_from_url,
)
from .config import (
    DEFAULT_NAMESPACE,
    DEFAULT_NINE_SUFFIX,
    DEFAULT_THRIFT_PORT_NAME,
    PROJECTS,
    ToolSpec,
    WorkloadKind,
    tool_resource_name,
)
from .errors import ClientConfigError

logger = logging.getLogger(__name__)

# Errors that mean "could not read the resource" rather than a bug.
FETCH_ERRORS = (ApiException, ClientConfigError, urllib3.exceptions.HTTPError)

Timestamp = Union[datetime, str, None]


def human_duration(delta: timedelta) -> str:
    """
    Format a duration the way kubectl prints resource ages.

    Precision drops as the duration grows: "90s", "5m30s", "2h15m", "3d4h",
    "400d", "3y20d". More than a second in the future is "<invalid>".
    """
    seconds = int(delta.total_seconds())
    if seconds < -1:
        return "<invalid>"
    if seconds < 0:
        return "0s"
    if seconds < 60 * 2:
        return f"{seconds}s"
    minutes = seconds // 60
    if minutes < 10:
        s = seconds % 60
        return f"{minutes}m" if s == 0 else f"{minutes}m{s}s"
    if minutes < 60 * 3:
        return f"{minutes}m"
    hours = minutes // 60
    if hours < 8:
        m = minutes % 60
        return f"{hours}h" if m == 0 else f"{hours}h{m}m"
    if hours < 48:
        return f"{hours}h"
    if hours < 24 * 8:
        h = hours % 24
        return f"{hours // 24}d" if h == 0 else f"{hours // 24}d{h}h"
    if hours < 24 * 365 * 2:
        return f"{hours // 24}d"
    if hours < 24 * 365 * 8:
        dy = (hours // 24) % 365
        years = hours // 24 // 365
        return f"{years}y" if dy == 0 else f"{years}y{dy}d"
    return f"{hours // 24 // 365}y"


def parse_timestamp(value: Timestamp) -> Optional[datetime]:
    """Accept a datetime from typed models or an RFC 3339 string from custom objects."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def age_since(created: Timestamp, now: Optional[datetime] = None) -> str:
    ts = parse_timestamp(created)
    if ts is None:
        return "<unknown>"
    now = now or datetime.now(timezone.utc)
    return human_duration(now - ts)


# =============================================================================
# Workload readiness
# =============================================================================


@dataclass(frozen=True)
class ReplicaCounts:
    ready: int
    desired: int
    created: Timestamp = None

    @property
    def is_ready(self) -> bool:
        return self.ready == self.desired


def _replica_set_counts(obj: Any) -> ReplicaCounts:
    # API server defaults spec.replicas to 1; ready_replicas is omitted at 0.
    desired = obj.spec.replicas if obj.spec.replicas is not None else 1
    ready = (obj.status.ready_replicas if obj.status else None) or 0
    return ReplicaCounts(ready=ready, desired=desired, created=obj.metadata.creation_timestamp)


def _statefulset_counts(name: str, namespace: str, kubeconfig: Optional[str]) -> ReplicaCounts:
    sts = get_kube_client(kubeconfig).apps.read_namespaced_stateful_set(name, namespace)
    return _replica_set_counts(sts)


def _deployment_counts(name: str, namespace: str, kubeconfig: Optional[str]) -> ReplicaCounts:
    deploy = get_kube_client(kubeconfig).apps.read_namespaced_deployment(name, namespace)
    return _replica_set_counts(deploy)


def pg_cluster_counts(pg: Dict[str, Any]) -> ReplicaCounts:
    """Instance counts of a CloudNativePG Cluster custom object."""
    spec = pg.get("spec") or {}
    status = pg.get("status") or {}
    desired = spec.get("instances")
    return ReplicaCounts(
        ready=status.get("readyInstances") or 0,
        desired=desired if desired is not None else 1,
        created=(pg.get("metadata") or {}).get("creationTimestamp"),
    )


def _pg_cluster_counts(name: str, namespace: str, kubeconfig: Optional[str]) -> ReplicaCounts:
    return pg_cluster_counts(get_pg_operator_client(kubeconfig).get(namespace, name))


_COUNTERS: Dict[WorkloadKind, Callable[[str, str, Optional[str]], ReplicaCounts]] = {
    WorkloadKind.STATEFULSET: _statefulset_counts,
    WorkloadKind.DEPLOYMENT: _deployment_counts,
    WorkloadKind.CLUSTER: _pg_cluster_counts,
}


def workload_counts(
    kind: WorkloadKind, name: str, namespace: str, kubeconfig: Optional[str] = None
) -> ReplicaCounts:
    """
    Fetch ready/desired counts of a workload.

    Raises:
        ApiException: the API request failed (status 404 when absent).
        ClientConfigError: no client could be built.
    """
    return _COUNTERS[WorkloadKind(kind)](name, namespace, kubeconfig)


def is_workload_ready(
    kind: WorkloadKind, name: str, namespace: str, kubeconfig: Optional[str] = None
) -> bool:
    """True iff the workload exists and its ready count equals the desired count."""
    try:
        counts = workload_counts(kind, name, namespace, kubeconfig)
    except FETCH_ERRORS as exc:
        logger.debug("%s %s/%s not readable: %s", kind, namespace, name, exc)
        return False
    return counts.is_ready


def workload_ready_and_age(
    kind: WorkloadKind, name: str, namespace: str, kubeconfig: Optional[str] = None
) -> Tuple[str, str]:
    """
    READY and AGE column values for a workload.

    Returns ("ready/desired", age) when found, ("0/0", "0s") when the
    workload does not exist, and ("", "") for any other error, which callers
    treat as "skip this row".
    """
    try:
        counts = workload_counts(kind, name, namespace, kubeconfig)
    except ApiException as exc:
        if exc.status == 404:
            return "0/0", "0s"
        logger.debug("%s %s/%s: %s", kind, namespace, name, exc)
        return "", ""
    except (ClientConfigError, urllib3.exceptions.HTTPError) as exc:
        logger.debug("%s %s/%s: %s", kind, namespace, name, exc)
        return "", ""
    return f"{counts.ready}/{counts.desired}", age_since(counts.created)


def is_cluster_ready(name: str, namespace: str, kubeconfig: Optional[str] = None) -> bool:
    """A NineCluster is ready when every project workload is ready."""
    for project in PROJECTS:
        if not is_workload_ready(project.kind, project.workload_name(name), namespace, kubeconfig):
            return False
    return True


# =============================================================================
# NineCluster lookup
# =============================================================================


@dataclass(frozen=True)
class NineCluster:
    name: str
    namespace: str
    data_volume: int = 0
    created: Timestamp = None

    @classmethod
    def from_object(cls, obj: Dict[str, Any]) -> "NineCluster":
        meta = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        return cls(
            name=meta.get("name", ""),
            namespace=meta.get("namespace", ""),
            data_volume=int(spec.get("dataVolume") or 0),
            created=meta.get("creationTimestamp"),
        )


def list_nine_clusters(
    name: Optional[str], namespace: Optional[str], kubeconfig: Optional[str] = None
) -> List[NineCluster]:
    """
    Fetch NineClusters.

    With a name, get that cluster from namespace (404 gives an empty list);
    without, list clusters in namespace, or in all namespaces when None.

    Raises:
        ApiException, ClientConfigError: the lookup failed.
    """
    nc = get_nine_client(kubeconfig)
    if name:
        try:
            items = [nc.get(namespace or DEFAULT_NAMESPACE, name)]
        except ApiException as exc:
            if exc.status == 404:
                return []
            raise
    else:
        items = nc.list(namespace)
    return [NineCluster.from_object(item) for item in items]


def find_nine_clusters(
    name: Optional[str], namespace: Optional[str], kubeconfig: Optional[str] = None
) -> Tuple[bool, List[NineCluster]]:
    """Like list_nine_clusters, but (False, []) when nothing is found or the lookup fails."""
    try:
        clusters = list_nine_clusters(name, namespace, kubeconfig)
    except FETCH_ERRORS as exc:
        logger.debug("NineCluster lookup failed: %s", exc)
        return False, []
    return bool(clusters), clusters


# =============================================================================
# Service access
# =============================================================================


def service_access_info(
    service: str, port_name: str, namespace: str, kubeconfig: Optional[str] = None
) -> Tuple[str, int]:
    """
    Address a client can use to reach a service port.

    ClusterIP services give the cluster IP and the port; NodePort services
    give the API server's IP and the node port. Other service types and
    lookup errors give ("", 0).
    """
    try:
        clients, configuration = get_kube_client_with_config(kubeconfig)
        svc = clients.core.read_namespaced_service(service, namespace)
    except FETCH_ERRORS as exc:
        logger.debug("service %s/%s not readable: %s", namespace, service, exc)
        return "", 0

    ports = svc.spec.ports or []
    if svc.spec.type == "ClusterIP":
        ip = svc.spec.cluster_ip or ""
        port = next((p.port for p in ports if p.name == port_name), 0)
    elif svc.spec.type == "NodePort":
        ip = ip_from_url(configuration.host)
        port = next((p.node_port for p in ports if p.name == port_name), 0)
    else:
        return "", 0
    return ip, port or 0


def format_access(protocol: str, ip: str, port: int) -> str:
    if protocol:
        return f"{protocol}://{ip}:{port}"
    return f"{ip}:{port}"


def tool_access_info(tool: ToolSpec, namespace: str, kubeconfig: Optional[str] = None) -> str:
    ip, port = service_access_info(
        tool_resource_name(tool.service), tool.port_name, namespace, kubeconfig
    )
    return format_access(tool.protocol, ip, port)


def thrift_access_info(
    name: str, namespace: str, kubeconfig: Optional[str] = None
) -> Tuple[str, int]:
    """Kyuubi thrift endpoint of a NineCluster."""
    service = name + DEFAULT_NINE_SUFFIX + "-kyuubi"
    return service_access_info(service, DEFAULT_THRIFT_PORT_NAME, namespace, kubeconfig)
