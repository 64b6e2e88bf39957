#!/usr/bin/env python3
"""
KUBELOCATE LIVE PROVIDER SUITE
------------------------------
KubernetesProvider against stubbed CoreV1Api / AppsV1Api objects.
No cluster is contacted.

Author: KubeLocate Team
Date: 2026-10-19
"""

from types import SimpleNamespace

import pytest
import urllib3
from kubernetes.client.rest import ApiException

from conftest import NAMESPACE, load_manifest, locator
from kubelocate.core.engine import EndpointResolver
from kubelocate.core.errors import ProviderError
from kubelocate.providers.kubernetes import KubernetesProvider


class StubApi:
    """Serves canned manifests keyed by (name, namespace) and namespace."""

    def __init__(self, reads=None, lists=None, error=None):
        self.reads = reads or {}
        self.lists = lists or {}
        self.error = error
        self.calls = []

    def _read(self, kind):
        def read(name, namespace):
            self.calls.append(("read", kind, namespace, name))
            if self.error:
                raise self.error
            if (kind, name, namespace) not in self.reads:
                raise ApiException(status=404, reason="Not Found")
            return self.reads[(kind, name, namespace)]
        return read

    def _list(self, kind):
        def list_(namespace):
            self.calls.append(("list", kind, namespace))
            if self.error:
                raise self.error
            return SimpleNamespace(items=self.lists.get((kind, namespace), []))
        return list_

    def __getattr__(self, attr):
        if attr.startswith("read_namespaced_"):
            return self._read(attr[len("read_namespaced_"):])
        if attr.startswith("list_namespaced_"):
            return self._list(attr[len("list_namespaced_"):])
        raise AttributeError(attr)


def _chain_provider(**overrides):
    deployment = load_manifest("deployment-no-service")
    rs = load_manifest("replica-set-deployment-no-service")
    pod = load_manifest("pod-deployment-no-service")
    apps = StubApi(
        reads={("deployment", "example-deployment-no-service", NAMESPACE): deployment},
        lists={("replica_set", NAMESPACE): [rs]},
        **overrides,
    )
    core = StubApi(lists={("pod", NAMESPACE): [pod], ("service", NAMESPACE): []}, **overrides)
    return KubernetesProvider(core, apps), core, apps


def test_resolves_through_ownership_chain():
    provider, core, apps = _chain_provider()
    resolver = EndpointResolver(provider)

    assert resolver.query(locator("deployment", "example-deployment-no-service")) == "http://172.17.0.11:8080"
    assert ("list", "replica_set", NAMESPACE) in apps.calls
    assert ("list", "pod", NAMESPACE) in core.calls


def test_not_found_is_absent():
    provider, _, _ = _chain_provider()

    assert provider.get_workload("deployment", NAMESPACE, "missing") is None
    assert provider.get_service(NAMESPACE, "missing") is None
    assert provider.get_pod(NAMESPACE, "missing") is None


def test_owned_listing_filters_by_uid():
    provider, _, _ = _chain_provider()

    assert provider.list_replica_groups_owned_by(NAMESPACE, "someone-else") == []
    assert len(provider.list_pods_owned_by(NAMESPACE, "8c1f2d3e-0000-4000-8000-000000000004")) == 1


def test_unsupported_workload_kind():
    provider, _, apps = _chain_provider()

    assert provider.get_workload("daemonset", NAMESPACE, "x") is None
    assert apps.calls == []


def test_kind_is_filled_when_server_omits_it():
    deployment = load_manifest("deployment-no-service")
    deployment.pop("kind")
    apps = StubApi(reads={("stateful_set", "db", NAMESPACE): deployment})
    provider = KubernetesProvider(StubApi(), apps)

    assert provider.get_workload("statefulset", NAMESPACE, "db").kind == "statefulset"


@pytest.mark.parametrize("error, status", [
    (ApiException(status=403, reason="Forbidden"), 403),
    (ApiException(status=500, reason="Internal Server Error"), 500),
    (urllib3.exceptions.ProtocolError("connection reset"), None),
])
def test_transport_failures_propagate_as_provider_error(error, status):
    provider, _, _ = _chain_provider(error=error)
    resolver = EndpointResolver(provider)

    with pytest.raises(ProviderError) as excinfo:
        resolver.resolve(locator("deployment", "example-deployment-no-service"))

    assert excinfo.value.status == status
    assert excinfo.value.__cause__ is error
