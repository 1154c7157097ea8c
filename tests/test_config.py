"""Tests for nine-cli config."""

from nine_cli.config import (
    PRINT_FMT_CLUSTER_LIST,
    PRINT_FMT_CLUSTER_PROJECT_LIST,
    PROJECTS,
    SUGGESTIONS,
    TOOLS,
    WorkloadKind,
    tool_resource_name,
)


def test_project_names_unique():
    """Each project appears once and has a distinct workload suffix."""
    assert len({p.name for p in PROJECTS}) == len(PROJECTS)
    assert len({p.suffix for p in PROJECTS}) == len(PROJECTS)


def test_project_workload_name():
    """Project workloads are named after the cluster plus the project suffix."""
    minio = next(p for p in PROJECTS if p.name == "minio")
    assert minio.workload_name("dw") == "dw-nine-minio"
    assert minio.kind is WorkloadKind.STATEFULSET


def test_projects_only_use_statefulsets_and_pg_clusters():
    assert {p.kind for p in PROJECTS} == {WorkloadKind.STATEFULSET, WorkloadKind.CLUSTER}


def test_tools_have_workloads_and_service():
    for tool in TOOLS:
        assert tool.workloads
        assert tool.service
        assert tool.port_name
        for workload in tool.workloads:
            assert workload.kind in (WorkloadKind.STATEFULSET, WorkloadKind.DEPLOYMENT)


def test_tool_resource_name():
    assert tool_resource_name("superset") == "nineinfra-superset"


def test_workload_kind_prints_as_value():
    assert str(WorkloadKind.CLUSTER) == "cluster"
    assert WorkloadKind("deployment") is WorkloadKind.DEPLOYMENT


def test_row_formats_pad_columns():
    row = PRINT_FMT_CLUSTER_LIST.format("NAME", "DATAVOLUME", "READY", "NAMESPACE", "AGE")
    assert row.split("\t")[0] == "NAME".ljust(20)
    row = PRINT_FMT_CLUSTER_PROJECT_LIST.format("a", "b", "c", "d", "e")
    assert row.split("\t")[0] == "a".ljust(40)


def test_timeout_suggestion_is_first():
    assert next(iter(SUGGESTIONS)) == "connection timed out"
