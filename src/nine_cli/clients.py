"""
Kubernetes API client construction.

Every helper takes the kubeconfig path explicitly and builds a fresh
ApiClient from it, so no process-wide default configuration is loaded or
shared between calls.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

import yaml
from kubernetes import client, config
from kubernetes.config import ConfigException

from .config import (
    DIRECTPV_DRIVE_CRD,
    NINE_CLUSTER_CRD,
    PG_CLUSTER_CRD,
    CustomResourceDef,
)
from .errors import ClientConfigError

logger = logging.getLogger(__name__)

IPV4_PATTERN = re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b")


@dataclass(frozen=True)
class KubeClients:
    core: client.CoreV1Api
    apps: client.AppsV1Api


@dataclass(frozen=True)
class CustomResourceClient:
    """CustomObjectsApi bound to a single custom resource definition."""

    api: client.CustomObjectsApi
    crd: CustomResourceDef

    def with_plural(self, plural: str) -> "CustomResourceClient":
        """Same group/version, different resource (e.g. directpvvolumes)."""
        return CustomResourceClient(self.api, replace(self.crd, plural=plural))

    def get(self, namespace: str, name: str) -> Dict[str, Any]:
        return self.api.get_namespaced_custom_object(
            self.crd.group, self.crd.version, namespace, self.crd.plural, name
        )

    def list(self, namespace: Optional[str] = None) -> List[Dict[str, Any]]:
        """List objects in namespace, or across all namespaces when None."""
        if namespace:
            resp = self.api.list_namespaced_custom_object(
                self.crd.group, self.crd.version, namespace, self.crd.plural
            )
        else:
            resp = self.api.list_cluster_custom_object(
                self.crd.group, self.crd.version, self.crd.plural
            )
        return resp.get("items") or []

    def delete(self, namespace: str, name: str) -> Dict[str, Any]:
        return self.api.delete_namespaced_custom_object(
            self.crd.group, self.crd.version, namespace, self.crd.plural, name
        )

    def get_cluster_scoped(self, name: str) -> Dict[str, Any]:
        return self.api.get_cluster_custom_object(
            self.crd.group, self.crd.version, self.crd.plural, name
        )

    def list_cluster_scoped(self) -> List[Dict[str, Any]]:
        resp = self.api.list_cluster_custom_object(
            self.crd.group, self.crd.version, self.crd.plural
        )
        return resp.get("items") or []


def get_kube_config(kubeconfig: Optional[str] = None) -> client.Configuration:
    """
    Resolve the client configuration.

    Uses the explicit kubeconfig path when given, otherwise the default
    discovery (KUBECONFIG, then ~/.kube/config). Without an explicit path,
    falls back to the in-cluster service account when no kubeconfig is found.

    Raises:
        ClientConfigError: if no usable configuration could be loaded.
    """
    configuration = client.Configuration()
    try:
        config.load_kube_config(
            config_file=kubeconfig,
            client_configuration=configuration,
            persist_config=False,
        )
        logger.debug("loaded kubeconfig %s, host %s", kubeconfig or "(default)", configuration.host)
        return configuration
    except (ConfigException, OSError, yaml.YAMLError) as exc:
        if kubeconfig:
            raise ClientConfigError(f"failed to load kubeconfig {kubeconfig}: {exc}") from exc
        kubeconfig_error = exc

    try:
        config.load_incluster_config(client_configuration=configuration)
    except ConfigException as exc:
        logger.debug("in-cluster configuration unavailable: %s", exc)
        raise ClientConfigError(
            f"no configuration has been provided: {kubeconfig_error}"
        ) from kubeconfig_error
    logger.debug("loaded in-cluster configuration, host %s", configuration.host)
    return configuration


def _api_client(kubeconfig: Optional[str]) -> Tuple[client.ApiClient, client.Configuration]:
    configuration = get_kube_config(kubeconfig)
    return client.ApiClient(configuration=configuration), configuration


def get_kube_client(kubeconfig: Optional[str] = None) -> KubeClients:
    clients, _ = get_kube_client_with_config(kubeconfig)
    return clients


def get_kube_client_with_config(
    kubeconfig: Optional[str] = None,
) -> Tuple[KubeClients, client.Configuration]:
    """Core/apps clients plus the configuration they were built from."""
    api_client, configuration = _api_client(kubeconfig)
    return (
        KubeClients(core=client.CoreV1Api(api_client), apps=client.AppsV1Api(api_client)),
        configuration,
    )


def _custom_resource_client(kubeconfig: Optional[str], crd: CustomResourceDef) -> CustomResourceClient:
    api_client, _ = _api_client(kubeconfig)
    return CustomResourceClient(api=client.CustomObjectsApi(api_client), crd=crd)


def get_nine_client(kubeconfig: Optional[str] = None) -> CustomResourceClient:
    return _custom_resource_client(kubeconfig, NINE_CLUSTER_CRD)


def get_pg_operator_client(kubeconfig: Optional[str] = None) -> CustomResourceClient:
    return _custom_resource_client(kubeconfig, PG_CLUSTER_CRD)


def get_directpv_client(kubeconfig: Optional[str] = None) -> CustomResourceClient:
    """DirectPV resources are cluster scoped; bound to drives by default."""
    return _custom_resource_client(kubeconfig, DIRECTPV_DRIVE_CRD)


def host_from_url(url: str) -> str:
    """Bare host of an API server URL: "https://10.0.0.1:6443" -> "10.0.0.1"."""
    if not url:
        return ""
    if "://" not in url:
        url = "//" + url
    return urlsplit(url).hostname or ""


def ip_from_url(url: str) -> str:
    """First IPv4 address in url, or "" when the server is addressed by name."""
    match = IPV4_PATTERN.search(url or "")
    return match.group(0) if match else ""


def get_kube_host(kubeconfig: Optional[str] = None) -> str:
    """API server host for display; empty when no configuration can be loaded."""
    try:
        configuration = get_kube_config(kubeconfig)
    except ClientConfigError as exc:
        logger.debug("cannot resolve API server host: %s", exc)
        return ""
    return host_from_url(configuration.host)
