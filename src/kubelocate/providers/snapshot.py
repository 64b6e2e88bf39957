#!/usr/bin/env python3
"""
KUBELOCATE SNAPSHOT PROVIDER
----------------------------
Serves resolver queries from a frozen set of manifests: either dicts handed
in directly or YAML files (multi-document aware) read from disk.

The ownership graph is indexed once at load time as
(namespace, owner UID) -> dependents, preserving document order so that
listing order is reproducible.

Author: KubeLocate Team
Date: 2026-10-19
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ruamel.yaml import YAML, YAMLError

from kubelocate.core.errors import ProviderError
from kubelocate.core.models import (
    PodResource,
    ReplicaGroupResource,
    ServiceResource,
    WorkloadResource,
)
from kubelocate.providers.base import ResourceProvider
from kubelocate.providers import manifests

logger = logging.getLogger("kubelocate.providers.snapshot")

YAML_SUFFIXES = (".yaml", ".yml")


class SnapshotProvider(ResourceProvider):
    """
    In-memory cluster snapshot. Never changes after construction, so it
    can be shared freely between threads.
    """

    def __init__(self, documents: Iterable[Mapping[str, Any]], default_namespace: str = "default"):
        self.default_namespace = default_namespace

        self._workloads: Dict[Tuple[str, str, str], WorkloadResource] = {}
        self._services: Dict[str, List[ServiceResource]] = defaultdict(list)
        self._pods: Dict[Tuple[str, str], PodResource] = {}
        self._replica_groups_by_owner: Dict[Tuple[str, str], List[ReplicaGroupResource]] = defaultdict(list)
        self._pods_by_owner: Dict[Tuple[str, str], List[PodResource]] = defaultdict(list)

        count = 0
        for doc in self._flatten(documents):
            self._index(doc)
            count += 1
        logger.debug(f"Snapshot indexed {count} manifests")

    @classmethod
    def from_path(cls, path: Union[str, Path], default_namespace: str = "default") -> "SnapshotProvider":
        """
        Loads every YAML document from a file, or recursively from a
        directory (symlinks are not followed).
        """
        root = Path(path).resolve()
        if not root.exists():
            raise ProviderError(f"Snapshot path missing: {root}")

        if root.is_file():
            files = [root]
        else:
            files = sorted(
                f for f in root.rglob("*")
                if f.is_file() and not f.is_symlink() and f.suffix.lower() in YAML_SUFFIXES
            )

        yaml = YAML(typ="safe")
        documents: List[Mapping[str, Any]] = []
        for file_path in files:
            try:
                # BOM-aware read, same as manifests edited on Windows
                text = file_path.read_text(encoding="utf-8-sig")
                documents.extend(doc for doc in yaml.load_all(text) if isinstance(doc, Mapping))
            except (OSError, YAMLError) as e:
                raise ProviderError(f"Unable to load snapshot file {file_path}: {e}") from e

        logger.info(f"Loaded {len(documents)} manifests from {root}")
        return cls(documents, default_namespace=default_namespace)

    def _flatten(self, documents: Iterable[Mapping[str, Any]]) -> Iterable[Mapping[str, Any]]:
        for doc in documents:
            if not isinstance(doc, Mapping):
                continue
            # kubectl output: List, PodList, DeploymentList ...
            if str(doc.get("kind", "")).endswith("List"):
                yield from self._flatten(doc.get("items") or [])
            else:
                yield doc

    def _index(self, doc: Mapping[str, Any]):
        kind = manifests.normalize_kind(doc.get("kind"))
        ns = self.default_namespace

        if kind in manifests.WORKLOAD_KINDS:
            workload = manifests.to_workload(doc, ns)
            self._workloads[(kind, workload.namespace, workload.name)] = workload
        elif kind == "service":
            service = manifests.to_service(doc, ns)
            self._services[service.namespace].append(service)
        elif kind == "replicaset":
            group = manifests.to_replica_group(doc, ns)
            for owner in group.owner_references:
                self._replica_groups_by_owner[(group.namespace, owner)].append(group)
        elif kind == "pod":
            pod = manifests.to_pod(doc, ns)
            self._pods[(pod.namespace, pod.name)] = pod
            for owner in pod.owner_references:
                self._pods_by_owner[(pod.namespace, owner)].append(pod)
        else:
            logger.debug(f"Ignoring manifest of kind '{doc.get('kind')}'")

    def get_workload(self, kind: str, namespace: str, name: str) -> Optional[WorkloadResource]:
        return self._workloads.get((manifests.normalize_kind(kind), namespace, name))

    def list_services(self, namespace: str) -> List[ServiceResource]:
        return list(self._services.get(namespace, []))

    def list_replica_groups_owned_by(self, namespace: str, uid: str) -> List[ReplicaGroupResource]:
        return list(self._replica_groups_by_owner.get((namespace, uid), []))

    def list_pods_owned_by(self, namespace: str, uid: str) -> List[PodResource]:
        return list(self._pods_by_owner.get((namespace, uid), []))

    def get_service(self, namespace: str, name: str) -> Optional[ServiceResource]:
        for service in self._services.get(namespace, []):
            if service.name == name:
                return service
        return None

    def get_pod(self, namespace: str, name: str) -> Optional[PodResource]:
        return self._pods.get((namespace, name))
