"""
Constants and resource definitions for nine-cli.

Defines the table layouts used for output, the custom resource coordinates
the CLI reads, and the declarative tables of NineCluster projects and
auxiliary tools whose readiness is aggregated.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple

# Row formats for tabular output (name column first, tab separated).
PRINT_FMT_CLUSTER_LIST = "{:<20}\t{:<10}\t{:<10}\t{:<10}\t{:<10}"
PRINT_FMT_TOOL_LIST = "{:<20}\t{:<10}\t{:<10}\t{:<10}\t{:<10}"
PRINT_FMT_CLUSTER_PROJECT_LIST = "{:<40}\t{:<10}\t{:<10}\t{:<10}\t{:<10}"

DEFAULT_NAMESPACE = "default"

# Resource naming: "<cluster><suffix>" for projects, "<prefix><name>" for tools.
DEFAULT_NINE_SUFFIX = "-nine"
DEFAULT_TOOLS_NAME_PREFIX = "nineinfra-"
DEFAULT_THRIFT_PORT_NAME = "thrift-binary"


@dataclass(frozen=True)
class CustomResourceDef:
    """Group/version/plural triple for a custom resource API."""

    group: str
    version: str
    plural: str


NINE_CLUSTER_CRD = CustomResourceDef("nine.nineinfra.tech", "v1alpha1", "nineclusters")
PG_CLUSTER_CRD = CustomResourceDef("postgresql.cnpg.io", "v1", "clusters")
DIRECTPV_DRIVE_CRD = CustomResourceDef("directpv.min.io", "v1beta1", "directpvdrives")


class WorkloadKind(str, enum.Enum):
    """Kinds of workloads whose readiness the CLI knows how to read."""

    STATEFULSET = "statefulset"
    DEPLOYMENT = "deployment"
    # CloudNativePG database cluster
    CLUSTER = "cluster"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ProjectSpec:
    """A workload role inside every NineCluster."""

    name: str
    kind: WorkloadKind
    suffix: str

    def workload_name(self, cluster_name: str) -> str:
        return cluster_name + self.suffix


@dataclass(frozen=True)
class ToolWorkload:
    name: str
    kind: WorkloadKind


@dataclass(frozen=True)
class ToolSpec:
    """An auxiliary service installed next to a NineCluster as a Helm release."""

    name: str
    workloads: Tuple[ToolWorkload, ...]
    service: str
    port_name: str
    protocol: str = ""


# Order matters: readiness checks and detail rows follow this order.
PROJECTS: Tuple[ProjectSpec, ...] = (
    ProjectSpec("minio", WorkloadKind.STATEFULSET, DEFAULT_NINE_SUFFIX + "-minio"),
    ProjectSpec("metastore", WorkloadKind.STATEFULSET, DEFAULT_NINE_SUFFIX + "-metastore"),
    ProjectSpec("kyuubi", WorkloadKind.STATEFULSET, DEFAULT_NINE_SUFFIX + "-kyuubi"),
    ProjectSpec("postgresql", WorkloadKind.CLUSTER, DEFAULT_NINE_SUFFIX + "-pg"),
)

TOOLS: Tuple[ToolSpec, ...] = (
    ToolSpec(
        name="superset",
        workloads=(
            ToolWorkload("superset", WorkloadKind.DEPLOYMENT),
            ToolWorkload("superset-worker", WorkloadKind.DEPLOYMENT),
            ToolWorkload("superset-postgresql", WorkloadKind.STATEFULSET),
            ToolWorkload("superset-redis-master", WorkloadKind.STATEFULSET),
        ),
        service="superset",
        port_name="http",
        protocol="http",
    ),
    ToolSpec(
        name="nifi",
        workloads=(
            ToolWorkload("nifi", WorkloadKind.STATEFULSET),
            ToolWorkload("nifi-zookeeper", WorkloadKind.STATEFULSET),
        ),
        service="nifi",
        port_name="https",
        protocol="https",
    ),
    ToolSpec(
        name="airflow",
        workloads=(
            ToolWorkload("airflow-webserver", WorkloadKind.DEPLOYMENT),
            ToolWorkload("airflow-scheduler", WorkloadKind.DEPLOYMENT),
            ToolWorkload("airflow-postgresql", WorkloadKind.STATEFULSET),
        ),
        service="airflow-webserver",
        port_name="airflow-ui",
        protocol="http",
    ),
    ToolSpec(
        name="grafana",
        workloads=(ToolWorkload("grafana", WorkloadKind.DEPLOYMENT),),
        service="grafana",
        port_name="service",
        protocol="http",
    ),
)


def tool_resource_name(suffix: str) -> str:
    return DEFAULT_TOOLS_NAME_PREFIX + suffix


# Known error substrings mapped to remediation hints; first match wins.
SUGGESTIONS = {
    "connection timed out": (
        "If you run the nine out of the k8s? or if the status of the NineCluster is not ready?"
    ),
    "connection refused": (
        "Is the Kubernetes API server reachable? Check --kubeconfig and the current context."
    ),
    "no configuration has been provided": (
        "No kubeconfig was found. Pass --kubeconfig or set the KUBECONFIG environment variable."
    ),
    "Invalid kube-config file": (
        "The kubeconfig file could not be parsed. Check the file passed to --kubeconfig."
    ),
    "failed to load kubeconfig": (
        "The kubeconfig file could not be parsed. Check the file passed to --kubeconfig."
    ),
    "Forbidden": (
        "The current user lacks RBAC permissions on NineCluster resources in this namespace."
    ),
    # body of a 404 from the API server when the resource type is not served
    "404 page not found": (
        "The NineCluster CRD does not seem to be installed. Is the nineinfra operator deployed?"
    ),
}

UNKNOWN_ERROR_SUGGESTION = (
    "I'm sorry, this error is not in my knowledge base. \n"
    "Could you please submit an issue on GitHub to help me improve my knowledge base? Thank you!"
)
