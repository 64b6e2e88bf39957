#!/usr/bin/env python3
"""
KUBELOCATE RESOURCE PROVIDER - Read-only cluster queries
--------------------------------------------------------
The resolver only talks to the cluster through this interface. Ownership
is exposed as a lookup ("who is owned by this UID"), never as links
between objects.

Implementations own transport concerns (auth, retries, timeouts) and
must raise ProviderError when a query fails, so a failed query is never
mistaken for a missing resource.

Author: KubeLocate Team
Date: 2026-10-19
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from kubelocate.core.models import (
    PodResource,
    ReplicaGroupResource,
    ServiceResource,
    WorkloadResource,
)


class ResourceProvider(ABC):

    @abstractmethod
    def get_workload(self, kind: str, namespace: str, name: str) -> Optional[WorkloadResource]:
        """Returns the workload, or None when it does not exist."""

    @abstractmethod
    def list_services(self, namespace: str) -> List[ServiceResource]:
        """All Services in the namespace, in the provider's listing order."""

    @abstractmethod
    def list_replica_groups_owned_by(self, namespace: str, uid: str) -> List[ReplicaGroupResource]:
        ...

    @abstractmethod
    def list_pods_owned_by(self, namespace: str, uid: str) -> List[PodResource]:
        ...

    @abstractmethod
    def get_service(self, namespace: str, name: str) -> Optional[ServiceResource]:
        ...

    @abstractmethod
    def get_pod(self, namespace: str, name: str) -> Optional[PodResource]:
        ...
