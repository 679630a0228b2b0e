# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/orchestrator.py

from __future__ import annotations

import argparse
import logging
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.exceptions import EndpointError, Fatal
from ..core.logger import Log
from ..core.sanity_checker import SanityChecker
from ..core.utils import U
from ..kube.client import ControlPlaneClient, KubectlClient
from ..kube.models import ClusterEndpoint, Provider
from ..providers.cluster_creator import ClusterCreator
from .endpoint_resolver import ClusterEndpointResolver
from .manifest_sanitizer import ManifestSanitizer
from .migration_verifier import MigrationVerifier, VerificationReport
from .namespace_selector import NamespaceSelector
from .resource_exporter import ResourceExporter
from .resource_importer import ImportResult, ResourceImporter
from .session import (
    DEFAULT_EXCLUDED_NAMESPACES,
    DEFAULT_RESOURCES,
    MigrationOptions,
    MigrationSession,
)
from .staging import StagingArea
from .storage_guidance import log_storage_guidance

STAGING_PREFIX = "k8s-conversion-"


class MigrationOrchestrator:
    """
    Main migration pipeline:

      sanity -> resolve source/target -> select namespaces -> export
      -> sanitize -> import -> storage guidance -> verify -> summary
    """

    def __init__(
        self,
        logger: logging.Logger,
        args: argparse.Namespace,
        *,
        client: Optional[ControlPlaneClient] = None,
        creator: Optional[ClusterCreator] = None,
        input_fn: Callable[[str], str] = input,
    ):
        self.logger = logger
        self.args = args
        self.timeout_s = float(getattr(args, "timeout", 600) or 600)
        self.client = client or KubectlClient(logger, timeout_s=self.timeout_s)
        self.creator = creator or ClusterCreator(logger, timeout_s=self.timeout_s)
        self.input_fn = input_fn

        self.resolver = ClusterEndpointResolver(logger, self.client)
        self.selector = NamespaceSelector(logger, self.client)
        self.exporter = ResourceExporter(logger, self.client)
        self.sanitizer = ManifestSanitizer(logger)
        self.importer = ResourceImporter(logger, self.client)
        self.verifier = MigrationVerifier(logger, self.client)

        self.session: Optional[MigrationSession] = None
        self.import_result: Optional[ImportResult] = None
        self.verification: Optional[VerificationReport] = None

        Log.trace(
            self.logger,
            "🧠 MigrationOrchestrator init: %s -> %s dry_run=%s",
            getattr(args, "source_provider", None),
            getattr(args, "target_provider", None),
            getattr(args, "dry_run", False),
        )

    # ------------------------------------------------------------------
    # configuration
    # ------------------------------------------------------------------

    @property
    def dry_run(self) -> bool:
        return bool(getattr(self.args, "dry_run", False))

    def _options(self) -> MigrationOptions:
        a = self.args
        return MigrationOptions(
            dry_run=self.dry_run,
            include_custom_resources=bool(getattr(a, "include_custom_resources", True)),
            transfer_storage=bool(getattr(a, "transfer_storage", False)),
            recreate_pvcs=bool(getattr(a, "recreate_pvcs", False)),
            timeout_s=self.timeout_s,
            crd_settle_s=float(getattr(a, "crd_settle", 10)),
            keep_staging=bool(getattr(a, "keep_staging", False)),
        )

    def _resources(self) -> Tuple[str, ...]:
        extra = list(getattr(self.args, "resources", None) or [])
        base: List[str] = [] if getattr(self.args, "no_default_resources", False) else list(DEFAULT_RESOURCES)
        return tuple(U.dedupe(base + extra))

    def _excluded(self) -> List[str]:
        extra = list(getattr(self.args, "exclude_namespaces", None) or [])
        return U.dedupe(list(DEFAULT_EXCLUDED_NAMESPACES) + extra)

    def _staging_root(self) -> Tuple[Path, bool]:
        """(root, user_supplied)"""
        given = getattr(self.args, "staging_dir", None)
        if given:
            return Path(given).expanduser().resolve(), True
        return Path(tempfile.gettempdir()) / f"{STAGING_PREFIX}{U.now_ts()}", False

    def _log_configuration(self) -> None:
        a = self.args
        Log.banner(self.logger, "Kubernetes Cluster Conversion")
        self.logger.info("Starting cluster conversion from %s to %s...", a.source_provider, a.target_provider)
        rows: List[Tuple[str, Any]] = [
            ("Source Provider", a.source_provider),
            ("Target Provider", a.target_provider),
            ("Source Cluster", a.source_cluster),
            ("Target Cluster", a.target_cluster),
            ("Source Context", getattr(a, "source_context", None)),
            ("Target Context", getattr(a, "target_context", None)),
            ("Source Kubeconfig", getattr(a, "source_kubeconfig", None)),
            ("Target Kubeconfig", getattr(a, "target_kubeconfig", None)),
            ("Namespaces", " ".join(getattr(a, "namespaces", None) or []) or None),
        ]
        if getattr(a, "all_namespaces", False):
            rows.append(("All Namespaces", f"true (excluding {' '.join(self._excluded())})"))
        rows += [
            ("Resources", " ".join(self._resources())),
            ("Custom Resources", getattr(a, "include_custom_resources", True)),
            ("Transfer Storage", getattr(a, "transfer_storage", False)),
            ("Recreate PVCs", getattr(a, "recreate_pvcs", False)),
            ("Create Target", getattr(a, "create_target", False)),
        ]
        if getattr(a, "create_target", False):
            rows.append(("Target Nodes", getattr(a, "target_nodes", 3)))
            rows.append(("Target K8s Version", getattr(a, "target_k8s_version", None)))
        rows += [
            ("Dry Run", self.dry_run),
            ("Interactive", getattr(a, "interactive", False)),
            ("Force", getattr(a, "force", False)),
            ("Timeout", f"{self.timeout_s:g}s"),
            ("Staging Directory", getattr(a, "staging_dir", None)),
        ]

        self.logger.info("Configuration:")
        for label, value in rows:
            if value is None or value == "":
                continue
            self.logger.info("  %-20s %s", f"{label}:", value)

    def _confirm(self) -> bool:
        if not getattr(self.args, "interactive", False) or getattr(self.args, "force", False) or self.dry_run:
            return True

        Log.warn(self.logger, "This operation will export resources from the source cluster and import them to the target cluster.")
        Log.warn(self.logger, "It may affect running workloads and services.")
        try:
            answer = self.input_fn("Do you want to continue? (y/n): ")
        except EOFError:
            answer = ""
        if answer.strip() in ("y", "Y"):
            return True
        self.logger.info("Operation cancelled by user.")
        return False

    # ------------------------------------------------------------------
    # endpoints
    # ------------------------------------------------------------------

    def _resolve_source(self) -> ClusterEndpoint:
        a = self.args
        self.logger.info("Validating source cluster...")
        return self.resolver.resolve(
            a.source_provider,
            a.source_cluster,
            explicit_context=getattr(a, "source_context", None),
            kubeconfig=getattr(a, "source_kubeconfig", None),
        )

    def _resolve_target(self) -> ClusterEndpoint:
        a = self.args
        provider = Provider.parse(a.target_provider)
        context = getattr(a, "target_context", None)
        kubeconfig = getattr(a, "target_kubeconfig", None)

        if not getattr(a, "create_target", False):
            self.logger.info("Validating target cluster...")
            return self.resolver.resolve(provider, a.target_cluster, explicit_context=context, kubeconfig=kubeconfig)

        try:
            return self.resolver.resolve(provider, a.target_cluster, explicit_context=context, kubeconfig=kubeconfig)
        except EndpointError as e:
            self.logger.info("Target cluster %s is not available (%s); creating it.", a.target_cluster, e)

        created_context = self.creator.create(
            provider,
            a.target_cluster,
            nodes=int(getattr(a, "target_nodes", 3) or 3),
            version=getattr(a, "target_k8s_version", None),
            dry_run=self.dry_run,
        )
        if self.dry_run:
            # Nothing was created, so there is nothing to connect to.
            return ClusterEndpoint(provider, a.target_cluster, context or created_context, kubeconfig)
        return self.resolver.resolve(
            provider,
            a.target_cluster,
            explicit_context=context or created_context,
            kubeconfig=kubeconfig,
        )

    def _select_namespaces(self, source: Optional[ClusterEndpoint], staging: StagingArea) -> Tuple[str, ...]:
        a = self.args
        include = list(getattr(a, "namespaces", None) or [])
        all_ns = bool(getattr(a, "all_namespaces", False))

        if source is None and all_ns:
            # import-only: the staged tree is the namespace universe
            include, all_ns = list(staging.planned), False

        return self.selector.select(source, include=include, all_namespaces=all_ns, exclude=self._excluded())

    # ------------------------------------------------------------------
    # reporting
    # ------------------------------------------------------------------

    def build_report(self) -> Dict[str, Any]:
        s = self.session
        assert s is not None
        return {
            "source": s.source.describe() if s.source else None,
            "target": s.target.describe(),
            "dry_run": s.dry_run,
            "namespaces": list(s.namespaces),
            "resources": list(s.resources),
            "staging_dir": str(s.staging.root),
            "import": self.import_result.to_dict() if self.import_result else None,
            "verification": self.verification.to_dict() if self.verification else None,
            "warnings": list(s.warnings),
        }

    def _write_report(self) -> None:
        path = getattr(self.args, "report", None)
        if not path:
            return
        p = Path(path).expanduser()
        U.atomic_write_text(p, U.json_dump(self.build_report()) + "\n")
        self.logger.info("📝 Report written: %s", p)

    def _log_summary(self) -> None:
        s = self.session
        assert s is not None
        Log.banner(self.logger, "Summary")
        if self.verification and not self.verification.skipped:
            for ns, nv in self.verification.namespaces.items():
                if not nv.exists:
                    self.logger.info("  %-24s missing on target", ns)
                    continue
                counts = ", ".join(f"{k} {v.observed}/{v.expected}" for k, v in nv.kinds.items()) or "no resources"
                self.logger.info("  %-24s %s; pods running %d/%d", ns, counts, nv.pods[0], nv.pods[1])

        if s.warnings:
            Log.warn(self.logger, f"Completed with {len(s.warnings)} warning(s)")
        else:
            Log.ok(self.logger, "Cluster conversion completed successfully.")

    def _finish_staging(self, staging: StagingArea, user_supplied: bool, export_started: bool, failed: bool) -> None:
        s = self.session
        if self.dry_run:
            return
        if user_supplied:
            self.logger.info("Staging directory retained at %s", staging.root)
            return

        keep = bool(getattr(self.args, "keep_staging", False))
        has_warnings = bool(s and s.warnings)
        if keep or has_warnings or (failed and export_started):
            self.logger.info("Temporary staging directory retained at %s", staging.root)
            if has_warnings or failed:
                self.logger.info("You may want to inspect these files before re-running the import.")
            return

        if staging.exists():
            Log.trace(self.logger, "🧹 removing staging dir %s", staging.root)
            staging.remove()

    # ------------------------------------------------------------------
    # pipeline
    # ------------------------------------------------------------------

    def run(self) -> int:
        self._log_configuration()
        if not self._confirm():
            return 0

        import_only = bool(getattr(self.args, "import_only", False))
        root, user_supplied = self._staging_root()
        staging = StagingArea(root, dry_run=self.dry_run)
        # checked before sanity, which creates the staging dir
        if import_only and not staging.exists():
            raise Fatal(2, f"--import-only needs an existing staging directory: {root}")

        Log.step(self.logger, "Sanity checks")
        SanityChecker(self.logger, self.args).die_if_failed()

        if import_only:
            staging.scan()

        source = None if import_only else self._resolve_source()
        target = self._resolve_target()

        namespaces = self._select_namespaces(source, staging)
        self.session = MigrationSession(
            source=source,
            target=target,
            staging=staging,
            options=self._options(),
            resources=self._resources(),
            namespaces=namespaces,
        )
        session = self.session

        export_started = False
        failed = True
        try:
            if not import_only:
                export_started = True
                self.exporter.export(session)
            else:
                self.logger.info("Reusing staged resources in %s", staging.root)

            self.sanitizer.sanitize(session)
            self.import_result = self.importer.import_(session)

            if session.options.transfer_storage:
                log_storage_guidance(self.logger, Provider.parse(self.args.source_provider), target.provider, dry_run=self.dry_run)

            self.verification = self.verifier.verify(session, target)
            session.warnings.extend(self.verification.warnings)

            self._log_summary()
            self._write_report()
            failed = False
        finally:
            self._finish_staging(staging, user_supplied, export_started, failed)

        Log.banner(self.logger, "End of Kubernetes Cluster Conversion")
        return 0
