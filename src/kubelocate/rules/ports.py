#!/usr/bin/env python3
"""
KUBELOCATE PORT SELECTOR
------------------------
Picks one port out of an ordered list of named candidates.

Policy:
  * A requested name must match exactly (case-sensitive); no match means
    no answer.
  * Without a requested name the first declared port wins. Conventional
    names ('http', 'web', ...) get no special treatment.

Author: KubeLocate Team
Date: 2026-10-19
"""

from typing import Optional, Sequence, TypeVar, Union

from kubelocate.core.models import ContainerPort, ServicePort

P = TypeVar("P", ContainerPort, ServicePort)


class PortSelector:

    def select(self, candidates: Sequence[P], requested_name: Optional[str] = None) -> Optional[P]:
        if not candidates:
            return None

        if requested_name is None:
            return candidates[0]

        for candidate in candidates:
            if candidate.name == requested_name:
                return candidate
        return None

    def map_target(self, service_port: ServicePort,
                   container_ports: Sequence[ContainerPort]) -> Optional[int]:
        """
        Resolves the container port a Service port forwards to.
        Named targets go through the container port list; numeric targets
        are taken as-is; a missing target defaults to the service port.
        """
        target: Union[int, str, None] = service_port.target_port
        if target is None or target == "":
            return service_port.port
        if isinstance(target, int):
            return target
        if target.isdigit():
            return int(target)

        named = self.select(container_ports, target)
        return named.container_port if named else None
