# SPDX-License-Identifier: LGPL-3.0-or-later
import pytest
import yaml

from kube2kube.kube.models import empty_list_document
from kube2kube.orchestrator.staging import StagingArea


def _write(path, doc):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(doc), encoding="utf-8")


@pytest.fixture
def tree(tmp_path):
    root = tmp_path / "stage"
    _write(root / "crds.yaml", empty_list_document([{"kind": "CustomResourceDefinition"}]))
    _write(root / "web" / "namespace.yaml", {"kind": "Namespace", "metadata": {"name": "web"}})
    _write(root / "web" / "deployments.yaml", empty_list_document([{"kind": "Deployment"}, {"kind": "Deployment"}]))
    _write(root / "web" / "custom-resources" / "widgets.example.com.yaml", empty_list_document([{"kind": "Widget"}]))
    (root / "batch").mkdir()
    return root


@pytest.mark.unit
class TestStagingArea:
    def test_scan_rebuilds_inventory(self, tree):
        staging = StagingArea(tree)

        staging.scan()

        assert staging.planned == ["batch", "web"]
        assert staging.inventory == {
            (None, "customresourcedefinitions"): 1,
            ("web", "namespace"): 1,
            ("web", "deployments"): 2,
            ("web", "cr/widgets.example.com"): 1,
        }

    def test_enumeration(self, tree):
        staging = StagingArea(tree)

        assert staging.staged_kinds("web") == ["deployments"]
        assert staging.custom_resource_names("web") == ["widgets.example.com"]
        assert staging.has_namespace("batch")
        assert not staging.has_namespace_definition("batch")
        assert staging.has_crds()
        assert [p.name for p in staging.iter_manifest_files()] == [
            "crds.yaml",
            "namespace.yaml",
            "deployments.yaml",
            "widgets.example.com.yaml",
        ]

    def test_expected_count(self, tree):
        staging = StagingArea(tree)

        assert staging.expected_count("web", "deployments") == 2
        assert staging.expected_count("web", "secrets") == 0

    def test_dry_run_uses_inventory(self, tmp_path):
        staging = StagingArea(tmp_path / "dry", dry_run=True)
        staging.ensure()
        staging.ensure_namespace("web")
        staging.record("web", "namespace", 1)
        staging.record("web", "secrets", 3)
        staging.record("web", "cr/widgets.example.com", 1)
        staging.write_document(staging.kind_path("web", "secrets"), empty_list_document())

        assert not (tmp_path / "dry").exists()
        assert staging.has_namespace("web")
        assert staging.has_namespace_definition("web")
        assert staging.staged_kinds("web") == ["secrets"]
        assert staging.custom_resource_names("web") == ["widgets.example.com"]
        assert staging.expected_count("web", "secrets") == 3
        assert not staging.has_crds()

    def test_remove(self, tree):
        staging = StagingArea(tree)

        staging.remove()

        assert not tree.exists()
