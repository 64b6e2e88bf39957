#!/usr/bin/env python3
"""
KUBELOCATE ENGINE - The Endpoint Resolver
-----------------------------------------
Walks from a locator to a dialable endpoint:

  1. Workload lookup (kind/namespace/name).
  2. Service path: the Service fronting the workload, matched by selector
     first and owner reference second.
  3. Ownership path, only when no Service exists and exactly one replica
     is reported: workload -> ReplicaSet -> Pod (StatefulSets own their
     Pods directly).

Absence and ambiguity both resolve to None. Provider failures propagate
untouched. The engine keeps no state between calls.

Author: KubeLocate Team
Date: 2026-10-19
"""

import logging
from typing import Optional, Sequence, TypeVar, Union

from kubelocate.core.config import ResolverSettings
from kubelocate.core.models import (
    Endpoint,
    Locator,
    PodResource,
    Resolution,
    ServiceResource,
    WorkloadResource,
)
from kubelocate.parsing.locator import LocatorParser
from kubelocate.providers.base import ResourceProvider
from kubelocate.providers.manifests import WORKLOAD_KINDS, normalize_kind
from kubelocate.rules.matching import ServiceMatcher
from kubelocate.rules.ports import PortSelector

logger = logging.getLogger("kubelocate.engine")

STRATEGY_POD = "pod-ownership"
STRATEGY_DIRECT_SERVICE = "direct-service"
STRATEGY_DIRECT_POD = "direct-pod"

T = TypeVar("T")


class EndpointResolver:
    """
    Resolves locators against a ResourceProvider. Safe to call from
    several threads at once as long as the provider is.
    """

    def __init__(self, provider: ResourceProvider, settings: Optional[ResolverSettings] = None):
        self.provider = provider
        self.settings = settings or ResolverSettings()
        self.parser = LocatorParser()
        self.matcher = ServiceMatcher()
        self.ports = PortSelector()

    def resolve(self, locator: Union[Locator, str]) -> Optional[Endpoint]:
        resolution = self.resolve_detailed(locator)
        return resolution.endpoint if resolution else None

    def query(self, locator_text: str) -> Optional[str]:
        """Returns the endpoint as 'scheme://host:port', or None."""
        endpoint = self.resolve(locator_text)
        return str(endpoint) if endpoint else None

    def resolve_detailed(self, locator: Union[Locator, str]) -> Optional[Resolution]:
        if isinstance(locator, str):
            locator = self.parser.parse(locator)

        kind = normalize_kind(locator.kind)
        if kind in WORKLOAD_KINDS:
            return self._resolve_workload(locator, kind)
        if kind == "service":
            return self._resolve_direct_service(locator)
        if kind == "pod":
            return self._resolve_direct_pod(locator)

        logger.warning(f"Unsupported kind '{locator.kind}' in {locator}")
        return None

    def _port_name(self, locator: Locator) -> Optional[str]:
        return locator.query_params.get(self.settings.port_name_param)

    def _resolve_workload(self, locator: Locator, kind: str) -> Optional[Resolution]:
        workload = self.provider.get_workload(kind, locator.namespace, locator.name)
        if workload is None:
            logger.info(f"Unresolved {locator}: {kind} not found")
            return None

        match = self.matcher.match(workload, self.provider.list_services(locator.namespace))
        if match is not None:
            strategy, service = match
            logger.debug(f"{locator}: service '{service.name}' matched by {strategy}")
            return self._from_service(locator, service, strategy, workload)

        if workload.desired_replicas != 1:
            logger.info(
                f"Unresolved {locator}: no service and {workload.desired_replicas} replicas reported "
                f"(exactly 1 required)"
            )
            return None

        pod = self._find_single_pod(locator, workload)
        if pod is None:
            return None
        return self._from_pod(locator, pod, STRATEGY_POD)

    def _find_single_pod(self, locator: Locator, workload: WorkloadResource) -> Optional[PodResource]:
        owner_uid = workload.uid
        if workload.kind == "deployment":
            groups = self.provider.list_replica_groups_owned_by(workload.namespace, workload.uid)
            group = self._exactly_one(locator, "replica set", groups)
            if group is None:
                return None
            owner_uid = group.uid

        pods = self.provider.list_pods_owned_by(workload.namespace, owner_uid)
        return self._exactly_one(locator, "pod", pods)

    def _exactly_one(self, locator: Locator, label: str, items: Sequence[T]) -> Optional[T]:
        if len(items) != 1:
            logger.info(f"Unresolved {locator}: expected exactly one owned {label}, found {len(items)}")
            return None
        return items[0]

    def _from_service(self, locator: Locator, service: ServiceResource, strategy: str,
                      workload: Optional[WorkloadResource] = None) -> Optional[Resolution]:
        if not service.is_addressable:
            logger.info(f"Unresolved {locator}: service '{service.name}' has no cluster address")
            return None

        port = self.ports.select(service.ports, self._port_name(locator))
        if port is None:
            logger.info(f"Unresolved {locator}: no matching port on service '{service.name}'")
            return None

        target = None
        if workload is not None:
            target = self.ports.map_target(port, workload.container_ports)

        return Resolution(
            locator=locator,
            endpoint=self._endpoint(service.cluster_ip, port.port),
            strategy=strategy,
            source=service.name,
            target_port=target,
        )

    def _from_pod(self, locator: Locator, pod: PodResource, strategy: str) -> Optional[Resolution]:
        if not pod.ip:
            logger.info(f"Unresolved {locator}: pod '{pod.name}' has no IP yet")
            return None

        port = self.ports.select(pod.container_ports, self._port_name(locator))
        if port is None:
            logger.info(f"Unresolved {locator}: no matching container port on pod '{pod.name}'")
            return None

        return Resolution(
            locator=locator,
            endpoint=self._endpoint(pod.ip, port.container_port),
            strategy=strategy,
            source=pod.name,
        )

    def _resolve_direct_service(self, locator: Locator) -> Optional[Resolution]:
        service = self.provider.get_service(locator.namespace, locator.name)
        if service is None:
            logger.info(f"Unresolved {locator}: service not found")
            return None
        return self._from_service(locator, service, STRATEGY_DIRECT_SERVICE)

    def _resolve_direct_pod(self, locator: Locator) -> Optional[Resolution]:
        pod = self.provider.get_pod(locator.namespace, locator.name)
        if pod is None:
            logger.info(f"Unresolved {locator}: pod not found")
            return None
        return self._from_pod(locator, pod, STRATEGY_DIRECT_POD)

    def _endpoint(self, host: str, port: int) -> Endpoint:
        return Endpoint(scheme=self.settings.scheme_for(port), host=host, port=port)
