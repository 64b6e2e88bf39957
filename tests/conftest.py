"""
Pytest configuration and shared fixtures.
"""

import copy
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
from ruamel.yaml import YAML

from kubelocate.core.engine import EndpointResolver
from kubelocate.providers.snapshot import SnapshotProvider

FIXTURES = Path(__file__).parent / "fixtures"
NAMESPACE = "serverless-workflow-greeting-quarkus"

_yaml = YAML(typ="safe")
_cache: Dict[str, Dict[str, Any]] = {}


def load_manifest(name: str) -> Dict[str, Any]:
    """Returns a private copy of tests/fixtures/deployment/<name>.yaml."""
    if name not in _cache:
        _cache[name] = _yaml.load((FIXTURES / "deployment" / f"{name}.yaml").read_text())
    return copy.deepcopy(_cache[name])


@pytest.fixture
def manifest() -> Callable[[str], Dict[str, Any]]:
    return load_manifest


@pytest.fixture
def resolver_for() -> Callable[..., EndpointResolver]:
    """Builds a resolver over an in-memory snapshot of the given manifests."""
    def _build(*documents: Dict[str, Any], **kwargs: Any) -> EndpointResolver:
        return EndpointResolver(SnapshotProvider(documents), **kwargs)
    return _build


@pytest.fixture
def no_service_chain() -> Callable[[], Dict[str, Dict[str, Any]]]:
    """The deployment -> replica set -> pod chain without a Service."""
    def _build() -> Dict[str, Dict[str, Any]]:
        return {
            "deployment": load_manifest("deployment-no-service"),
            "replica_set": load_manifest("replica-set-deployment-no-service"),
            "pod": load_manifest("pod-deployment-no-service"),
        }
    return _build


def locator(kind: str, name: str, query: str = "", namespace: str = NAMESPACE) -> str:
    api = "v1" if kind in ("service", "pod") else "apps/v1"
    text = f"kubernetes:{api}/{kind}/{namespace}/{name}"
    return f"{text}?{query}" if query else text
