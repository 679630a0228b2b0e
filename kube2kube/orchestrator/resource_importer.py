# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/resource_importer.py

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..core.exceptions import KubectlError, NamespaceCreationError, namespace_creation_failed
from ..core.logger import Log
from ..core.utils import U
from ..kube.client import ControlPlaneClient
from .kind_graph import KindGraph
from .session import MigrationSession, is_pvc_kind


@dataclass
class ImportResult:
    imported: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    applied: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every namespace that was not skipped got created."""
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "imported": list(self.imported),
            "skipped": list(self.skipped),
            "failed": list(self.failed),
            "applied": list(self.applied),
        }


class ResourceImporter:
    """
    Replays the staging area into the target cluster.

    Order: CRDs (then a settle delay), and per namespace the namespace object,
    built-in kinds in KindGraph order, then custom resources. Apply failures are
    warnings; a namespace that cannot be created is skipped.
    """

    def __init__(
        self,
        logger: logging.Logger,
        client: ControlPlaneClient,
        *,
        graph: Optional[KindGraph] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.logger = logger
        self.client = client
        self.graph = graph or KindGraph()
        self.sleep = sleep

    def _apply(
        self, session: MigrationSession, log: Any, result: ImportResult, path: Path, what: str, ns: Optional[str]
    ) -> bool:
        if session.dry_run:
            Log.dry_run(log, f"Would import {what} from {path}")
            result.applied.append(str(path))
            return True
        try:
            self.client.apply_file(session.target, path)
        except KubectlError as e:
            where = f" in namespace {ns}" if ns else ""
            session.warn(log, f"Failed to import some {what}{where}: {e}", file=str(path))
            return False
        result.applied.append(str(path))
        Log.ok(log, f"Imported {what}" + (f" in namespace {ns}" if ns else ""))
        return True

    def _import_crds(self, session: MigrationSession, result: ImportResult) -> None:
        staging = session.staging
        if not (session.options.include_custom_resources and staging.has_crds()):
            return

        log = Log.bind(self.logger, phase="import")
        log.info("Importing Custom Resource Definitions...")
        self._apply(session, log, result, staging.crds_path, "Custom Resource Definitions", None)

        settle = float(session.options.crd_settle_s)
        if session.dry_run:
            Log.dry_run(log, f"Would wait {settle:g}s for CRDs to be established")
            return
        if settle > 0:
            log.info("Waiting for CRDs to be established...")
            self.sleep(settle)

    def _exists(self, session: MigrationSession, ns: str) -> bool:
        try:
            return self.client.namespace_exists(session.target, ns)
        except KubectlError:
            return False

    def _create_namespace(self, session: MigrationSession, log: Any, ns: str) -> None:
        try:
            self.client.create_namespace(session.target, ns)
        except KubectlError as e:
            if self._exists(session, ns):
                log.info("Namespace %s already exists in target cluster.", ns)
                return
            raise namespace_creation_failed(
                f"Failed to create namespace {ns}. Skipping this namespace.", e, namespace=ns
            ) from e

    def _ensure_namespace(self, session: MigrationSession, log: Any, ns: str) -> None:
        staging = session.staging

        if staging.has_namespace_definition(ns):
            log.info("Creating namespace: %s", ns)
            if session.dry_run:
                Log.dry_run(log, f"Would create namespace {ns} from {staging.namespace_path(ns)}")
                return
            try:
                self.client.apply_file(session.target, staging.namespace_path(ns))
                return
            except KubectlError as e:
                log.warning("Failed to create namespace %s (%s). Trying to create it directly.", ns, e)
            self._create_namespace(session, log, ns)
            return

        log.info("Namespace definition not found, creating namespace %s directly.", ns)
        if session.dry_run:
            Log.dry_run(log, f"Would create namespace {ns}")
            return
        self._create_namespace(session, log, ns)

    def _import_namespace(self, session: MigrationSession, log: Any, result: ImportResult, ns: str) -> None:
        staging = session.staging

        for kind in self.graph.order(staging.staged_kinds(ns)):
            if is_pvc_kind(kind) and not session.options.migrate_pvcs:
                log.info("Skipping PVCs as requested.")
                continue
            log.info("Importing %s for namespace %s...", kind, ns)
            self._apply(session, log, result, staging.kind_path(ns, kind), kind, ns)

        if not session.options.include_custom_resources:
            return
        crs = staging.custom_resource_names(ns)
        if crs:
            log.info("Importing custom resources for namespace %s...", ns)
        for crd in sorted(crs):
            self._apply(session, log, result, staging.custom_path(ns, crd), f"custom resource {crd}", ns)

    def import_(self, session: MigrationSession) -> ImportResult:
        U.banner(self.logger, "Import")
        self.logger.info("Importing resources to target cluster %s", session.target.describe())
        result = ImportResult()

        self._import_crds(session, result)

        for ns in U.iter_progress(list(session.namespaces), "Importing"):
            log = Log.bind(self.logger, phase="import", namespace=ns)
            log.info("Importing resources for namespace: %s", ns)

            if not session.staging.has_namespace(ns):
                session.warn(log, f"No resources found for namespace {ns}, skipping.")
                result.skipped.append(ns)
                continue

            try:
                self._ensure_namespace(session, log, ns)
            except NamespaceCreationError as e:
                Log.fail(log, str(e))
                session.warnings.append(str(e))
                result.failed.append(ns)
                continue

            self._import_namespace(session, log, result, ns)
            result.imported.append(ns)

        Log.ok(self.logger, f"Import completed: {len(result.imported)} namespace(s), {len(result.applied)} file(s) applied")
        return result
