#!/usr/bin/env python3
"""
KUBELOCATE KUBERNETES PROVIDER
------------------------------
Live-cluster implementation of ResourceProvider on top of the official
kubernetes client. Objects returned by the client are serialized back to
their API (camelCase) form and read through the same manifest reader the
snapshot provider uses.

A 404 on a direct read means "absent". Every other API or transport
failure is raised as ProviderError so callers can tell a failed query
from a missing resource.

Author: KubeLocate Team
Date: 2026-10-19
"""

import logging
from typing import Any, Callable, List, Mapping, Optional

import urllib3
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from kubelocate.core.errors import ProviderError
from kubelocate.core.models import (
    PodResource,
    ReplicaGroupResource,
    ServiceResource,
    WorkloadResource,
)
from kubelocate.providers.base import ResourceProvider
from kubelocate.providers import manifests

logger = logging.getLogger("kubelocate.providers.kubernetes")


class KubernetesProvider(ResourceProvider):

    def __init__(self, core_api: Any, apps_api: Any, api_client: Optional[Any] = None):
        self.core_api = core_api
        self.apps_api = apps_api
        self._api_client = api_client or client.ApiClient()

        self._workload_readers = {
            "deployment": self.apps_api.read_namespaced_deployment,
            "statefulset": self.apps_api.read_namespaced_stateful_set,
        }

    @classmethod
    def connect(cls, context: Optional[str] = None) -> "KubernetesProvider":
        """
        Loads in-cluster config first (when running in a pod), then falls
        back to kubeconfig. An explicit context always uses kubeconfig.
        """
        try:
            if context:
                config.load_kube_config(context=context)
                logger.info(f"Loaded kubeconfig context '{context}'")
            else:
                try:
                    config.load_incluster_config()
                    logger.info("Loaded in-cluster Kubernetes config")
                except config.ConfigException:
                    config.load_kube_config()
                    logger.info("Loaded kubeconfig")
        except config.ConfigException as e:
            raise ProviderError(f"No Kubernetes config available: {e}") from e

        api_client = client.ApiClient()
        return cls(client.CoreV1Api(api_client), client.AppsV1Api(api_client), api_client)

    def _call(self, description: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ApiException as e:
            raise ProviderError(f"Kubernetes API error while {description}: {e.status} {e.reason}",
                                status=e.status) from e
        except urllib3.exceptions.HTTPError as e:
            raise ProviderError(f"Kubernetes transport error while {description}: {e}") from e

    def _read(self, description: str, func: Callable[..., Any], name: str, namespace: str) -> Optional[Mapping[str, Any]]:
        try:
            obj = self._call(description, func, name, namespace)
        except ProviderError as e:
            if e.status == 404:
                logger.debug(f"Not found while {description}")
                return None
            raise
        return self._to_dict(obj)

    def _list(self, description: str, func: Callable[..., Any], namespace: str) -> List[Mapping[str, Any]]:
        result = self._call(description, func, namespace)
        return [self._to_dict(item) for item in (result.items or [])]

    def _to_dict(self, obj: Any) -> Mapping[str, Any]:
        return self._api_client.sanitize_for_serialization(obj)

    def get_workload(self, kind: str, namespace: str, name: str) -> Optional[WorkloadResource]:
        canonical = manifests.normalize_kind(kind)
        reader = self._workload_readers.get(canonical)
        if reader is None:
            logger.warning(f"Workload kind '{kind}' is not supported")
            return None

        doc = self._read(f"reading {canonical} {namespace}/{name}", reader, name, namespace)
        if doc is None:
            return None
        # Serialized objects keep 'kind' only when the server sent it
        doc = dict(doc)
        doc.setdefault("kind", canonical)
        return manifests.to_workload(doc, namespace)

    def list_services(self, namespace: str) -> List[ServiceResource]:
        docs = self._list(f"listing services in {namespace}", self.core_api.list_namespaced_service, namespace)
        return [manifests.to_service(doc, namespace) for doc in docs]

    def list_replica_groups_owned_by(self, namespace: str, uid: str) -> List[ReplicaGroupResource]:
        docs = self._list(f"listing replica sets in {namespace}", self.apps_api.list_namespaced_replica_set, namespace)
        groups = [manifests.to_replica_group(doc, namespace) for doc in docs]
        return [g for g in groups if uid in g.owner_references]

    def list_pods_owned_by(self, namespace: str, uid: str) -> List[PodResource]:
        docs = self._list(f"listing pods in {namespace}", self.core_api.list_namespaced_pod, namespace)
        pods = [manifests.to_pod(doc, namespace) for doc in docs]
        return [p for p in pods if uid in p.owner_references]

    def get_service(self, namespace: str, name: str) -> Optional[ServiceResource]:
        doc = self._read(f"reading service {namespace}/{name}", self.core_api.read_namespaced_service, name, namespace)
        return manifests.to_service(doc, namespace) if doc is not None else None

    def get_pod(self, namespace: str, name: str) -> Optional[PodResource]:
        doc = self._read(f"reading pod {namespace}/{name}", self.core_api.read_namespaced_pod, name, namespace)
        return manifests.to_pod(doc, namespace) if doc is not None else None
