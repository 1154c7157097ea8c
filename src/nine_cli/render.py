"""
Tabular output for NineClusters, their projects and tools.

print_cluster_list() gives one row per NineCluster, print_nine_cluster()
one row per project workload of a cluster, and print_tool_list() one row per
installed tool. All output goes to stdout.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

import click

from .config import (
    PRINT_FMT_CLUSTER_LIST,
    PRINT_FMT_CLUSTER_PROJECT_LIST,
    PRINT_FMT_TOOL_LIST,
    PROJECTS,
    TOOLS,
    ToolSpec,
    tool_resource_name,
)
from .shell import release_exists
from .status import (
    NineCluster,
    age_since,
    is_cluster_ready,
    is_workload_ready,
    tool_access_info,
    workload_ready_and_age,
)


def print_cluster_list(clusters: Iterable[NineCluster], kubeconfig: Optional[str] = None) -> None:
    click.echo(PRINT_FMT_CLUSTER_LIST.format("NAME", "DATAVOLUME", "READY", "NAMESPACE", "AGE"))
    for cluster in clusters:
        ready = str(is_cluster_ready(cluster.name, cluster.namespace, kubeconfig)).lower()
        click.echo(
            PRINT_FMT_CLUSTER_LIST.format(
                cluster.name,
                str(cluster.data_volume),
                ready,
                cluster.namespace,
                age_since(cluster.created),
            )
        )


def print_cluster_project_list(name: str, namespace: str, kubeconfig: Optional[str] = None) -> None:
    """Rows for each project; a project whose status could not be read is left out."""
    for project in PROJECTS:
        workload = project.workload_name(name)
        ready, age = workload_ready_and_age(project.kind, workload, namespace, kubeconfig)
        if ready and age:
            click.echo(
                PRINT_FMT_CLUSTER_PROJECT_LIST.format(workload, project.name, str(project.kind), ready, age)
            )


def print_nine_cluster(cluster: NineCluster, kubeconfig: Optional[str] = None) -> None:
    click.echo(PRINT_FMT_CLUSTER_PROJECT_LIST.format("NAME", "PROJECT", "TYPE", "READY", "AGE"))
    print_cluster_project_list(cluster.name, cluster.namespace, kubeconfig)


def tool_readiness(tool: ToolSpec, namespace: str, kubeconfig: Optional[str] = None) -> Tuple[int, int]:
    """(ready workloads, total workloads) of a tool, checked one by one."""
    ready = 0
    for workload in tool.workloads:
        if is_workload_ready(workload.kind, tool_resource_name(workload.name), namespace, kubeconfig):
            ready += 1
    return ready, len(tool.workloads)


def print_cluster_tool_list(name: str, namespace: str, kubeconfig: Optional[str] = None) -> None:
    """Rows for each tool whose Helm release is installed in namespace."""
    for tool in TOOLS:
        if not release_exists(tool_resource_name(tool.name), namespace, kubeconfig):
            continue
        ready, total = tool_readiness(tool, namespace, kubeconfig)
        if total == 0:
            continue
        click.echo(
            PRINT_FMT_TOOL_LIST.format(
                name,
                tool.name,
                f"{ready}/{total}",
                namespace,
                tool_access_info(tool, namespace, kubeconfig),
            )
        )


def print_tool_list(clusters: Iterable[NineCluster], kubeconfig: Optional[str] = None) -> None:
    click.echo(PRINT_FMT_TOOL_LIST.format("NINENAME", "TOOLNAME", "READY", "NAMESPACE", "ACCESS"))
    for cluster in clusters:
        print_cluster_tool_list(cluster.name, cluster.namespace, kubeconfig)
