#!/usr/bin/env python3
"""
KUBELOCATE SETTINGS
-------------------
Resolver defaults with optional environment overrides.

Author: KubeLocate Team
Date: 2026-10-19
"""

import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from kubelocate.core.models import PORT_NAME_PARAM

logger = logging.getLogger("kubelocate.config")

ENV_DEFAULT_SCHEME = "KUBELOCATE_DEFAULT_SCHEME"
ENV_SECURE_PORTS = "KUBELOCATE_SECURE_PORTS"


@dataclass(frozen=True)
class ResolverSettings:
    default_scheme: str = "http"
    secure_scheme: str = "https"
    secure_ports: Tuple[int, ...] = (443,)
    port_name_param: str = PORT_NAME_PARAM

    def scheme_for(self, port: int) -> str:
        """Endpoints on a secure port are addressed with the secure scheme."""
        return self.secure_scheme if port in self.secure_ports else self.default_scheme

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ResolverSettings":
        env = os.environ if environ is None else environ
        defaults = cls()

        scheme = env.get(ENV_DEFAULT_SCHEME, "").strip() or defaults.default_scheme

        secure_ports = defaults.secure_ports
        raw_ports = env.get(ENV_SECURE_PORTS, "").strip()
        if raw_ports:
            try:
                secure_ports = tuple(int(p) for p in raw_ports.split(",") if p.strip())
            except ValueError:
                logger.warning(f"Invalid {ENV_SECURE_PORTS} '{raw_ports}'. Falling back to default: {defaults.secure_ports}")

        return cls(default_scheme=scheme, secure_ports=secure_ports)
