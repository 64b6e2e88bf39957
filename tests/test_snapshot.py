#!/usr/bin/env python3
"""
KUBELOCATE SNAPSHOT SUITE
-------------------------
SnapshotProvider over YAML manifests:
1. Directory and file loading, List flattening, synthesized UIDs
2. Owner-UID lookups and read-only results
3. Manifest reader tolerance for sparse documents

Author: KubeLocate Team
Date: 2026-10-19
"""

from pathlib import Path

import pytest

from conftest import FIXTURES, NAMESPACE
from kubelocate.core.errors import ProviderError
from kubelocate.providers.manifests import normalize_kind, synthesize_uid, to_service, to_workload
from kubelocate.providers.snapshot import SnapshotProvider


def test_from_directory_reads_every_manifest():
    provider = SnapshotProvider.from_path(FIXTURES / "deployment")

    workload = provider.get_workload("deployment", NAMESPACE, "example-deployment-no-service")
    assert workload.desired_replicas == 1
    assert [p.container_port for p in workload.container_ports] == [8080]

    groups = provider.list_replica_groups_owned_by(NAMESPACE, workload.uid)
    assert [g.name for g in groups] == ["example-deployment-no-service-6d8f7c9b5"]

    pods = provider.list_pods_owned_by(NAMESPACE, groups[0].uid)
    assert [p.ip for p in pods] == ["172.17.0.11"]


def test_multi_document_and_list_files():
    provider = SnapshotProvider.from_path(FIXTURES / "cluster")

    assert provider.get_workload("deployment", "shop", "frontend").desired_replicas == 3
    assert [s.name for s in provider.list_services("shop")] == ["frontend"]

    worker = provider.get_workload("deployment", "shop", "worker")
    rs = provider.list_replica_groups_owned_by("shop", worker.uid)[0]
    pod = provider.list_pods_owned_by("shop", rs.uid)[0]
    assert pod.name == "worker-5c9d-abcde"
    assert provider.get_pod("shop", "worker-5c9d-abcde") == pod


def test_single_file():
    provider = SnapshotProvider.from_path(FIXTURES / "deployment" / "deployment-service.yaml")
    service = provider.get_service(NAMESPACE, "example-deployment-with-service")

    assert service.cluster_ip == "10.10.10.11"
    assert service.ports[0].target_port == 8080


def test_missing_path_is_a_provider_error(tmp_path: Path):
    with pytest.raises(ProviderError):
        SnapshotProvider.from_path(tmp_path / "nowhere")


def test_broken_yaml_is_a_provider_error(tmp_path: Path):
    (tmp_path / "broken.yaml").write_text("kind: Service\nmetadata: [unclosed\n")
    with pytest.raises(ProviderError):
        SnapshotProvider.from_path(tmp_path)


def test_missing_namespace_defaults(tmp_path: Path):
    (tmp_path / "svc.yaml").write_text(
        "apiVersion: v1\nkind: Service\nmetadata:\n  name: bare\nspec:\n  clusterIP: 10.0.0.1\n"
    )
    provider = SnapshotProvider.from_path(tmp_path, default_namespace="team-a")
    assert provider.get_service("team-a", "bare").uid == synthesize_uid("Service", "team-a", "bare")


def test_lookups_return_copies():
    provider = SnapshotProvider.from_path(FIXTURES / "cluster")
    provider.list_services("shop").clear()
    assert len(provider.list_services("shop")) == 1
    assert provider.list_services("missing") == []


@pytest.mark.parametrize("raw, expected", [
    ("Deployment", "deployment"), ("deploy", "deployment"), ("sts", "statefulset"),
    ("svc", "service"), ("Pods", "pod"), ("CronJob", "cronjob"), (None, ""),
])
def test_normalize_kind(raw, expected):
    assert normalize_kind(raw) == expected


def test_manifest_reader_tolerates_sparse_documents():
    workload = to_workload({"kind": "Deployment", "metadata": {"name": "x"}})
    assert workload.desired_replicas == 0
    assert workload.container_ports == ()
    assert workload.template_labels == {}

    service = to_service({"kind": "Service", "metadata": {"name": "y"}, "spec": {"ports": [{"port": "80"}]}})
    assert service.ports[0].port == 80
    assert service.is_addressable is False


def test_label_maps_are_read_only():
    provider = SnapshotProvider.from_path(FIXTURES / "deployment")
    workload = provider.get_workload("deployment", NAMESPACE, "example-deployment-with-service")
    service = provider.get_service(NAMESPACE, "example-deployment-with-service")

    with pytest.raises(TypeError):
        workload.template_labels["app"] = "other"
    with pytest.raises(TypeError):
        service.selector["app"] = "other"
    assert service.selector == {"app": "example-deployment-with-service"}
