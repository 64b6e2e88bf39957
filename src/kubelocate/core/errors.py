#!/usr/bin/env python3
"""
KUBELOCATE ERRORS
-----------------
Hard failures only. "Not found" and "ambiguous" are not errors: the
resolver answers ``None`` for both.

Author: KubeLocate Team
Date: 2026-10-19
"""

from typing import Optional


class KubeLocateError(Exception):
    """Base class for every failure raised by kubelocate."""


class LocatorParseError(KubeLocateError, ValueError):
    """The locator text does not follow scheme:apiVersion/kind/namespace/name[?k=v]."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid locator '{text}': {reason}")


class ProviderError(KubeLocateError, RuntimeError):
    """
    The cluster could not be queried (network, auth, API failure).
    Raised by providers and propagated untouched through the resolver.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
