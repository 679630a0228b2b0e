# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/resource_exporter.py
"""
Source cluster export.

Dumps CRDs, namespace objects, configured built-in kinds and custom resources
into the staging area as kubectl List documents. Individual failures never
abort the export; they become session warnings.

Exporting into a staging directory left by an earlier run removes the kind
and custom resource files this run did not write, so objects deleted on the
source are not replayed on the target. Sanitizer `.bak` files are kept.
"""

from __future__ import annotations

import logging
from typing import Any, List

from ..core.exceptions import KubectlError
from ..core.logger import Log
from ..core.utils import U
from ..kube.client import ControlPlaneClient
from ..kube.models import empty_list_document, list_items, object_name
from .session import MigrationSession
from .staging import StagingArea, custom_key

BUILTIN_CRD_SUFFIX = ".k8s.io"


def is_builtin_crd(name: str) -> bool:
    return name.endswith(BUILTIN_CRD_SUFFIX)


class ResourceExporter:
    def __init__(self, logger: logging.Logger, client: ControlPlaneClient):
        self.logger = logger
        self.client = client

    def _export_crds(self, session: MigrationSession) -> List[str]:
        """Dump all CRDs; returns the non-built-in CRD names for per-namespace export."""
        staging = session.staging
        log = Log.bind(self.logger, phase="export")
        Log.step(log, "Exporting Custom Resource Definitions...")
        try:
            doc = self.client.get_crds(session.source)
        except KubectlError as e:
            session.warn(log, f"Failed to export CRDs: {e}")
            return []

        items = list_items(doc)
        staging.record(None, "customresourcedefinitions", len(items))
        if not items:
            log.info("No Custom Resource Definitions found.")
            return []
        if session.dry_run:
            Log.dry_run(log, f"Would write {len(items)} CRDs to {staging.crds_path}")
        else:
            staging.write_document(staging.crds_path, doc)

        names = [object_name(o) for o in items]
        return [n for n in names if n and not is_builtin_crd(n)]

    def _export_namespace_object(self, session: MigrationSession, log: Any, ns: str) -> None:
        staging = session.staging
        try:
            doc = self.client.get_namespace(session.source, ns)
        except KubectlError as e:
            session.warn(log, f"Failed to export namespace definition for {ns}: {e}")
            return
        if not doc:
            session.warn(log, f"Namespace {ns} returned an empty definition")
            return

        staging.record(ns, "namespace", 1)
        if session.dry_run:
            Log.dry_run(log, f"Would write namespace definition to {staging.namespace_path(ns)}")
            return
        staging.write_document(staging.namespace_path(ns), doc)

    def _export_kind(self, session: MigrationSession, log: Any, ns: str, kind: str) -> None:
        staging = session.staging
        log.info("Exporting %s from namespace %s...", kind, ns)
        try:
            doc = self.client.list_resources(session.source, kind, ns)
        except KubectlError as e:
            session.warn(log, f"Failed to export {kind} from namespace {ns}: {e}", kind=kind)
            return

        items = list_items(doc)
        if not items:
            log.info("No %s found in namespace %s.", kind, ns)
            return

        staging.record(ns, kind, len(items))
        if session.dry_run:
            Log.dry_run(log, f"Would write {len(items)} {kind} to {staging.kind_path(ns, kind)}")
            return
        staging.write_document(staging.kind_path(ns, kind), empty_list_document(items))

    def _export_custom_resources(self, session: MigrationSession, log: Any, ns: str, crds: List[str]) -> None:
        staging = session.staging
        for crd in crds:
            try:
                doc = self.client.list_resources(session.source, crd, ns)
            except KubectlError as e:
                session.warn(log, f"Failed to export custom resources {crd} from namespace {ns}: {e}", crd=crd)
                continue

            items = list_items(doc)
            if not items:
                Log.trace(log, "No %s instances in namespace %s", crd, ns)
                continue

            log.info("Exporting %d %s from namespace %s", len(items), crd, ns)
            staging.record(ns, custom_key(crd), len(items))
            if session.dry_run:
                Log.dry_run(log, f"Would write {len(items)} {crd} to {staging.custom_path(ns, crd)}")
                continue
            staging.write_document(staging.custom_path(ns, crd), empty_list_document(items))

    def export(self, session: MigrationSession) -> StagingArea:
        staging = session.staging
        U.banner(self.logger, "Export")
        self.logger.info("Exporting resources from source cluster to %s", staging.root)
        staging.ensure()

        crds: List[str] = []
        if session.options.include_custom_resources:
            crds = self._export_crds(session)
        if staging.prune_crds():
            self.logger.info("Removed stale %s", staging.crds_path)

        for ns in U.iter_progress(list(session.namespaces), "Exporting"):
            log = Log.bind(self.logger, phase="export", namespace=ns)
            Log.step(log, f"Exporting resources from namespace: {ns}")
            staging.ensure_namespace(ns)
            self._export_namespace_object(session, log, ns)
            for kind in session.resources:
                self._export_kind(session, log, ns, kind)
            if crds:
                self._export_custom_resources(session, log, ns, crds)
            for path in staging.prune_namespace(ns):
                log.info("Removed stale %s", path)

        Log.ok(self.logger, "Resource export completed")
        return staging
