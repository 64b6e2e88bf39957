#!/usr/bin/env python3
"""
KUBELOCATE MANIFEST READER
--------------------------
Converts Kubernetes manifests (plain dicts in API camelCase, as written in
YAML or as serialized by the kubernetes client) into kubelocate models.
Both providers share this module so a snapshot and a live cluster are
read the same way.

Author: KubeLocate Team
Date: 2026-10-19
"""

import uuid
from typing import Any, Dict, List, Mapping, Optional, Tuple

from kubelocate.core.models import (
    ContainerPort,
    PodResource,
    ReplicaGroupResource,
    ServicePort,
    ServiceResource,
    WorkloadResource,
)

# Accepted spellings -> canonical kind
KIND_ALIASES = {
    "deployment": "deployment", "deployments": "deployment", "deploy": "deployment",
    "statefulset": "statefulset", "statefulsets": "statefulset", "sts": "statefulset",
    "replicaset": "replicaset", "replicasets": "replicaset", "rs": "replicaset",
    "service": "service", "services": "service", "svc": "service",
    "pod": "pod", "pods": "pod", "po": "pod",
}

WORKLOAD_KINDS = ("deployment", "statefulset")


def normalize_kind(kind: Optional[str]) -> str:
    """Maps 'Deployment', 'deployments', 'deploy' ... to 'deployment'."""
    value = (kind or "").strip().lower()
    return KIND_ALIASES.get(value, value)


def _section(doc: Mapping[str, Any], *path: str) -> Mapping[str, Any]:
    node: Any = doc
    for key in path:
        if not isinstance(node, Mapping):
            return {}
        node = node.get(key) or {}
    return node if isinstance(node, Mapping) else {}


def synthesize_uid(kind: str, namespace: str, name: str) -> str:
    """Stable UID for manifests that were never admitted by an API server."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"kubelocate/{normalize_kind(kind)}/{namespace}/{name}"))


def read_identity(doc: Mapping[str, Any], default_namespace: str = "default") -> Tuple[str, str, str]:
    """Returns (uid, namespace, name), synthesising a UID when it is absent."""
    metadata = _section(doc, "metadata")
    name = str(metadata.get("name") or "")
    namespace = str(metadata.get("namespace") or default_namespace)
    uid = metadata.get("uid") or synthesize_uid(doc.get("kind", ""), namespace, name)
    return str(uid), namespace, name


def read_owner_references(doc: Mapping[str, Any]) -> Tuple[str, ...]:
    refs = _section(doc, "metadata").get("ownerReferences") or []
    return tuple(str(ref["uid"]) for ref in refs if isinstance(ref, Mapping) and ref.get("uid"))


def read_container_ports(pod_spec: Mapping[str, Any]) -> Tuple[ContainerPort, ...]:
    """Flattens the ports of every container, in declaration order."""
    ports: List[ContainerPort] = []
    for container in pod_spec.get("containers") or []:
        for port in (container or {}).get("ports") or []:
            if port.get("containerPort") is None:
                continue
            ports.append(ContainerPort(name=port.get("name"), container_port=int(port["containerPort"])))
    return tuple(ports)


def _string_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(k): str(v) for k, v in value.items()}


def to_workload(doc: Mapping[str, Any], default_namespace: str = "default") -> WorkloadResource:
    uid, namespace, name = read_identity(doc, default_namespace)
    template = _section(doc, "spec", "template")
    replicas = _section(doc, "status").get("replicas") or 0

    return WorkloadResource(
        uid=uid,
        name=name,
        namespace=namespace,
        kind=normalize_kind(doc.get("kind")),
        owner_references=read_owner_references(doc),
        desired_replicas=int(replicas),
        template_labels=_string_map(_section(template, "metadata").get("labels")),
        container_ports=read_container_ports(_section(template, "spec")),
    )


def _target_port(value: Any):
    if value is None or isinstance(value, int):
        return value
    text = str(value)
    return int(text) if text.isdigit() else text


def to_service(doc: Mapping[str, Any], default_namespace: str = "default") -> ServiceResource:
    uid, namespace, name = read_identity(doc, default_namespace)
    spec = _section(doc, "spec")

    ports = tuple(
        ServicePort(name=p.get("name"), port=int(p["port"]), target_port=_target_port(p.get("targetPort")))
        for p in spec.get("ports") or []
        if p.get("port") is not None
    )
    return ServiceResource(
        uid=uid,
        name=name,
        namespace=namespace,
        selector=_string_map(spec.get("selector")),
        owner_references=read_owner_references(doc),
        cluster_ip=spec.get("clusterIP"),
        ports=ports,
    )


def to_replica_group(doc: Mapping[str, Any], default_namespace: str = "default") -> ReplicaGroupResource:
    uid, namespace, name = read_identity(doc, default_namespace)
    return ReplicaGroupResource(uid=uid, name=name, namespace=namespace,
                                owner_references=read_owner_references(doc))


def to_pod(doc: Mapping[str, Any], default_namespace: str = "default") -> PodResource:
    uid, namespace, name = read_identity(doc, default_namespace)
    return PodResource(
        uid=uid,
        name=name,
        namespace=namespace,
        owner_references=read_owner_references(doc),
        ip=_section(doc, "status").get("podIP") or None,
        container_ports=read_container_ports(_section(doc, "spec")),
    )
