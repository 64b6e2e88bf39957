#!/usr/bin/env python3
"""
KUBELOCATE SERVICE MATCHER
--------------------------
Finds the Service that fronts a workload. Strategies run in a fixed
order and the first strategy with any match wins:

  1. service-selector: the Service selector is satisfied by the labels of
     the workload's pod template.
  2. service-owner:    the Service lists the workload UID as an owner.

When several Services match under one strategy, the provider's listing
order decides.

Author: KubeLocate Team
Date: 2026-10-19
"""

from typing import Callable, List, Optional, Sequence, Tuple

from kubelocate.core.models import ServiceResource, WorkloadResource

STRATEGY_SELECTOR = "service-selector"
STRATEGY_OWNER = "service-owner"


class ServiceMatcher:

    def __init__(self):
        # Registry of strategies, evaluated in order
        self.strategies: List[Tuple[str, Callable[[WorkloadResource, ServiceResource], bool]]] = [
            (STRATEGY_SELECTOR, self._match_by_selector),
            (STRATEGY_OWNER, self._match_by_owner),
        ]

    def match(self, workload: WorkloadResource,
              services: Sequence[ServiceResource]) -> Optional[Tuple[str, ServiceResource]]:
        """
        Returns (strategy, service) for the first match, or None.
        Services without a cluster address cannot be dialled and are skipped.
        """
        candidates = [s for s in services
                      if s.namespace == workload.namespace and s.is_addressable]

        for strategy, rule in self.strategies:
            for service in candidates:
                if rule(workload, service):
                    return strategy, service
        return None

    def _match_by_selector(self, workload: WorkloadResource, service: ServiceResource) -> bool:
        # An empty selector selects nothing
        if not service.selector:
            return False
        labels = workload.template_labels
        return all(labels.get(key) == value for key, value in service.selector.items())

    def _match_by_owner(self, workload: WorkloadResource, service: ServiceResource) -> bool:
        return workload.uid in service.owner_references
