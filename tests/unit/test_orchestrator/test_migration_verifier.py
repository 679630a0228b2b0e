# SPDX-License-Identifier: LGPL-3.0-or-later
from unittest.mock import Mock

import pytest

from fakes.fake_control_plane import seed_source
from kube2kube.orchestrator.manifest_sanitizer import ManifestSanitizer
from kube2kube.orchestrator.migration_verifier import KindCount, MigrationVerifier
from kube2kube.orchestrator.resource_exporter import ResourceExporter
from kube2kube.orchestrator.resource_importer import ResourceImporter


@pytest.fixture
def migrated(logger, plane, make_session):
    seed_source(plane)
    target = plane.cluster("kind-prod")
    target.pods["web"] = ["Running", "Running"]

    def _migrated(namespaces=("web",), **opts):
        session = make_session(namespaces, **opts)
        ResourceExporter(logger, plane).export(session)
        ManifestSanitizer(logger).sanitize(session)
        ResourceImporter(logger, plane, sleep=Mock()).import_(session)
        return session

    return _migrated


@pytest.mark.unit
class TestMigrationVerifier:
    def test_clean_migration(self, logger, plane, migrated):
        session = migrated()

        report = MigrationVerifier(logger, plane).verify(session)

        assert report.warnings == []
        nv = report.namespaces["web"]
        assert nv.exists
        assert nv.kinds["deployments"] == KindCount(expected=2, observed=2)
        assert nv.kinds["widgets.example.com"] == KindCount(expected=1, observed=1)
        assert "pvc" not in nv.kinds
        assert nv.pods == (2, 2)

    def test_missing_objects(self, logger, plane, migrated):
        session = migrated()
        target = plane.cluster("kind-prod")
        target.objects[("web", "deployments")].pop("frontend")
        target.objects[("web", "secrets")].clear()

        report = MigrationVerifier(logger, plane).verify(session)

        assert "Only 1 of 2 deployments resources found in namespace web." in report.warnings
        assert "No secrets resources found in namespace web in target cluster." in report.warnings

    def test_missing_namespace(self, logger, plane, migrated):
        session = migrated()
        del plane.cluster("kind-prod").namespaces["web"]

        report = MigrationVerifier(logger, plane).verify(session)

        assert report.warnings == ["Namespace web does not exist in target cluster."]
        assert report.namespaces["web"].kinds == {}

    def test_pods_not_running(self, logger, plane, migrated):
        session = migrated()
        plane.cluster("kind-prod").pods["web"] = ["Running", "Pending", "CrashLoopBackOff"]

        report = MigrationVerifier(logger, plane).verify(session)

        assert report.namespaces["web"].pods == (1, 3)
        assert any(w.startswith("Some pods are not running in namespace web") for w in report.warnings)

    def test_pvcs_counted_when_migrated(self, logger, plane, migrated):
        session = migrated(recreate_pvcs=True)

        report = MigrationVerifier(logger, plane).verify(session)

        assert report.namespaces["web"].kinds["pvc"] == KindCount(expected=1, observed=1)

    def test_query_failure_is_a_warning(self, logger, plane, migrated):
        session = migrated()
        plane.fail("list_resources", "kind-prod", "services")

        report = MigrationVerifier(logger, plane).verify(session)

        assert any("Failed to list services in namespace web on target" in w for w in report.warnings)
        assert report.namespaces["web"].kinds["deployments"].observed == 2

    def test_dry_run_skips(self, logger, plane, make_session):
        session = make_session(["web"], dry_run=True)

        report = MigrationVerifier(logger, plane).verify(session)

        assert report.skipped
        assert plane.calls == []
        assert report.to_dict() == {"skipped": True, "namespaces": {}, "warnings": []}
