"""
CLI entry point for nine.

Parses global options (kubeconfig, namespace, debug) and dispatches to the
listing, detail, tool and maintenance subcommands.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

import click

from . import __version__
from .clients import get_nine_client
from .config import DEFAULT_NAMESPACE
from .errors import give_suggestion
from .render import print_cluster_list, print_nine_cluster, print_tool_list
from .status import FETCH_ERRORS, NineCluster, list_nine_clusters, thrift_access_info

# Shown at the bottom of nine --help / nine -h
EPILOG = """
Examples:

  nine list                       # NineClusters in all namespaces
  nine -n dw list                 # NineClusters in namespace dw
  nine show my-nine -n dw         # Project workloads of my-nine
  nine tools                      # Installed tools of every NineCluster
  nine thrift my-nine -n dw       # Kyuubi thrift endpoint of my-nine
  nine delete my-nine -n dw       # Delete my-nine (asks first)
  nine --kubeconfig ~/.kube/prod list
"""


@dataclass(frozen=True)
class Settings:
    kubeconfig: Optional[str]
    namespace: Optional[str]


class NineCommandError(click.ClickException):
    """A failed API call, reported with its remediation hint."""

    def __init__(self, err: BaseException) -> None:
        super().__init__(f"{err}\n{give_suggestion(err)}")


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def ask(label: str) -> bool:
    """Ask user for y/N input. Return True if the response is yes."""
    return click.confirm(label, default=False)


def _load_clusters(settings: Settings, name: Optional[str]) -> List[NineCluster]:
    namespace = settings.namespace
    if name and not namespace:
        namespace = DEFAULT_NAMESPACE
    try:
        clusters = list_nine_clusters(name, namespace, settings.kubeconfig)
    except FETCH_ERRORS as exc:
        raise NineCommandError(exc) from exc
    if not clusters:
        where = f" in namespace {namespace}" if namespace else ""
        if name:
            click.echo(f"NineCluster {name} not found{where}.", err=True)
        else:
            click.echo(f"No NineCluster found{where}.", err=True)
        sys.exit(1)
    return clusters


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.option(
    "--kubeconfig",
    metavar="PATH",
    type=click.Path(dir_okay=False),
    help="Path to the kubeconfig file (default: $KUBECONFIG or ~/.kube/config)",
)
@click.option(
    "-n",
    "--namespace",
    "namespace",
    metavar="NS",
    help="Limit to namespace NS (default: all namespaces for list/tools, 'default' otherwise)",
)
@click.option("--debug", is_flag=True, help="Log API and command activity to stderr")
@click.version_option(__version__, prog_name="nine")
@click.pass_context
def main(ctx: click.Context, kubeconfig: Optional[str], namespace: Optional[str], debug: bool) -> None:
    """
    Inspect NineClusters and the workloads and tools they run.

    Every subcommand reads the cluster fresh through the Kubernetes API
    selected by --kubeconfig.
    """
    configure_logging(debug)
    ctx.obj = Settings(kubeconfig=kubeconfig or None, namespace=namespace or None)


@main.command("list")
@click.pass_obj
def list_cmd(settings: Settings) -> None:
    """List NineClusters with their readiness."""
    print_cluster_list(_load_clusters(settings, None), settings.kubeconfig)


@main.command()
@click.argument("name")
@click.pass_obj
def show(settings: Settings, name: str) -> None:
    """Show the project workloads of NineCluster NAME."""
    for cluster in _load_clusters(settings, name):
        print_nine_cluster(cluster, settings.kubeconfig)


@main.command()
@click.argument("name", required=False)
@click.pass_obj
def tools(settings: Settings, name: Optional[str]) -> None:
    """List the tools installed next to NineCluster NAME (or every NineCluster)."""
    print_tool_list(_load_clusters(settings, name), settings.kubeconfig)


@main.command()
@click.argument("name")
@click.pass_obj
def thrift(settings: Settings, name: str) -> None:
    """Print the Kyuubi thrift endpoint of NineCluster NAME."""
    namespace = settings.namespace or DEFAULT_NAMESPACE
    ip, port = thrift_access_info(name, namespace, settings.kubeconfig)
    if not ip or not port:
        raise click.ClickException(f"no thrift endpoint found for NineCluster {name} in namespace {namespace}")
    click.echo(f"{ip}:{port}")


@main.command()
@click.argument("name")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def delete(settings: Settings, name: str, yes: bool) -> None:
    """Delete NineCluster NAME."""
    for cluster in _load_clusters(settings, name):
        if not yes and not ask(f"Delete NineCluster {cluster.name} in namespace {cluster.namespace}?"):
            click.echo("Aborted.")
            return
        try:
            get_nine_client(settings.kubeconfig).delete(cluster.namespace, cluster.name)
        except FETCH_ERRORS as exc:
            raise NineCommandError(exc) from exc
        click.echo(f"ninecluster {cluster.name} deleted")


if __name__ == "__main__":
    sys.exit(main())
