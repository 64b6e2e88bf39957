#!/usr/bin/env python3
"""
KUBELOCATE CORE MODELS
----------------------
Defines the data descriptors shared by the parser, the providers and the
resolution engine. Every object here is a read-only snapshot built fresh
for a single resolution call.

Author: KubeLocate Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

PORT_NAME_PARAM = "port-name"


def _freeze(obj, attr: str):
    # Read-only view over a private copy of the mapping
    object.__setattr__(obj, attr, MappingProxyType(dict(getattr(obj, attr) or {})))


@dataclass(frozen=True)
class Locator:
    """
    Structured form of a locator such as
    ``kubernetes:apps/v1/deployment/my-ns/my-app?port-name=http``.
    """
    scheme: str               # e.g. 'kubernetes'
    api_version: str          # 'v1' or 'group/version'
    kind: str                 # Lower-cased resource kind (e.g. 'deployment')
    namespace: str
    name: str
    query_params: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        _freeze(self, "query_params")

    @property
    def port_name(self) -> Optional[str]:
        return self.query_params.get(PORT_NAME_PARAM)

    def __str__(self) -> str:
        text = f"{self.scheme}:{self.api_version}/{self.kind}/{self.namespace}/{self.name}"
        if self.query_params:
            query = "&".join(f"{k}={v}" for k, v in self.query_params.items())
            text = f"{text}?{query}"
        return text


@dataclass(frozen=True)
class ContainerPort:
    name: Optional[str]
    container_port: int


@dataclass(frozen=True)
class ServicePort:
    name: Optional[str]
    port: int
    target_port: Union[int, str, None] = None  # IntOrString in the API


@dataclass(frozen=True)
class WorkloadResource:
    """
    A Deployment-like object. ``desired_replicas`` mirrors the replica
    count reported in the object's status, not the requested spec.
    """
    uid: str
    name: str
    namespace: str
    kind: str
    owner_references: Tuple[str, ...] = ()
    desired_replicas: int = 0
    template_labels: Mapping[str, str] = field(default_factory=dict, hash=False)
    container_ports: Tuple[ContainerPort, ...] = ()

    def __post_init__(self):
        _freeze(self, "template_labels")


@dataclass(frozen=True)
class ServiceResource:
    uid: str
    name: str
    namespace: str
    selector: Mapping[str, str] = field(default_factory=dict, hash=False)
    owner_references: Tuple[str, ...] = ()
    cluster_ip: Optional[str] = None
    ports: Tuple[ServicePort, ...] = ()

    def __post_init__(self):
        _freeze(self, "selector")

    @property
    def is_addressable(self) -> bool:
        """Headless Services ('None') and unassigned ones carry no address."""
        return bool(self.cluster_ip) and self.cluster_ip != "None"


@dataclass(frozen=True)
class ReplicaGroupResource:
    uid: str
    name: str = ""
    namespace: str = ""
    owner_references: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PodResource:
    uid: str
    name: str = ""
    namespace: str = ""
    owner_references: Tuple[str, ...] = ()
    ip: Optional[str] = None
    container_ports: Tuple[ContainerPort, ...] = ()


@dataclass(frozen=True)
class Endpoint:
    scheme: str
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


@dataclass(frozen=True)
class Resolution:
    """
    The detailed answer for a locator: the endpoint plus the path that
    produced it. ``target_port`` is only known on the Service path.
    """
    locator: Locator
    endpoint: Endpoint
    strategy: str             # service-selector | service-owner | pod-ownership | direct-*
    source: str               # Name of the resource that supplied the host
    target_port: Optional[int] = None

    @property
    def url(self) -> str:
        return str(self.endpoint)
