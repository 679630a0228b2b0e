# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/migration_verifier.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..core.exceptions import KubectlError
from ..core.logger import Log
from ..core.utils import U
from ..kube.client import ControlPlaneClient
from ..kube.models import ClusterEndpoint
from .session import MigrationSession, is_pvc_kind


@dataclass
class KindCount:
    expected: int
    observed: int

    @property
    def short(self) -> bool:
        return self.observed < self.expected

    def to_dict(self) -> Dict[str, int]:
        return {"expected": self.expected, "observed": self.observed}


@dataclass
class NamespaceVerification:
    namespace: str
    exists: bool = False
    kinds: Dict[str, KindCount] = field(default_factory=dict)
    pods: Tuple[int, int] = (0, 0)  # (running, total)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exists": self.exists,
            "kinds": {k: v.to_dict() for k, v in self.kinds.items()},
            "pods": {"running": self.pods[0], "total": self.pods[1]},
        }


@dataclass
class VerificationReport:
    namespaces: Dict[str, NamespaceVerification] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    skipped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skipped": self.skipped,
            "namespaces": {ns: v.to_dict() for ns, v in self.namespaces.items()},
            "warnings": list(self.warnings),
        }


class MigrationVerifier:
    """
    Compares staged counts with what the target cluster reports.
    Mismatches and query failures are recorded as warnings; nothing here raises.
    """

    def __init__(self, logger: logging.Logger, client: ControlPlaneClient):
        self.logger = logger
        self.client = client

    def _warn(self, report: VerificationReport, msg: str, **ctx: Any) -> None:
        report.warnings.append(msg)
        Log.warn(self.logger, msg, **ctx)

    def _count(
        self,
        report: VerificationReport,
        target: ClusterEndpoint,
        kind: str,
        ns: str,
    ) -> Optional[int]:
        try:
            return self.client.count_resources(target, kind, ns)
        except KubectlError as e:
            self._warn(report, f"Failed to list {kind} in namespace {ns} on target: {e}", namespace=ns, kind=kind)
            return None

    def _compare(
        self,
        report: VerificationReport,
        nv: NamespaceVerification,
        target: ClusterEndpoint,
        label: str,
        expected: int,
    ) -> None:
        ns = nv.namespace
        self.logger.info("Checking %s in namespace %s...", label, ns)
        observed = self._count(report, target, label, ns)
        if observed is None:
            observed = 0

        kc = KindCount(expected=expected, observed=observed)
        nv.kinds[label] = kc
        self.logger.info("Found %d of %d %s resources in namespace %s.", observed, expected, label, ns)

        if expected > 0 and observed == 0:
            self._warn(report, f"No {label} resources found in namespace {ns} in target cluster.", namespace=ns)
        elif kc.short:
            self._warn(report, f"Only {observed} of {expected} {label} resources found in namespace {ns}.", namespace=ns)

    def _check_pods(self, report: VerificationReport, nv: NamespaceVerification, target: ClusterEndpoint) -> None:
        ns = nv.namespace
        self.logger.info("Checking pod status in namespace %s...", ns)
        try:
            phases = self.client.pod_phases(target, ns)
        except KubectlError as e:
            self._warn(report, f"Failed to list pods in namespace {ns} on target: {e}", namespace=ns)
            return

        total = len(phases)
        running = sum(1 for p in phases if p == "Running")
        nv.pods = (running, total)
        if total == 0:
            self.logger.info("No pods found in namespace %s.", ns)
            return

        self.logger.info("%d of %d pods are running in namespace %s.", running, total, ns)
        if running < total:
            self._warn(
                report,
                f"Some pods are not running in namespace {ns}. Check with 'kubectl get pods -n {ns}'.",
                namespace=ns,
            )

    def verify(self, session: MigrationSession, target: Optional[ClusterEndpoint] = None) -> VerificationReport:
        target = target or session.target
        staging = session.staging
        report = VerificationReport()

        if session.dry_run:
            Log.dry_run(self.logger, "Skipping verification (nothing was imported)")
            report.skipped = True
            return report

        U.banner(self.logger, "Verify")
        self.logger.info("Verifying resource import in target cluster...")

        for ns in session.namespaces:
            self.logger.info("Verifying resources in namespace: %s", ns)
            nv = NamespaceVerification(namespace=ns)
            report.namespaces[ns] = nv

            try:
                nv.exists = self.client.namespace_exists(target, ns)
            except KubectlError as e:
                self._warn(report, f"Failed to check namespace {ns} on target: {e}", namespace=ns)
                continue
            if not nv.exists:
                report.warnings.append(f"Namespace {ns} does not exist in target cluster.")
                Log.fail(self.logger, f"Namespace {ns} does not exist in target cluster.", namespace=ns)
                continue

            for kind in session.resources:
                if is_pvc_kind(kind) and not session.options.migrate_pvcs:
                    continue
                self._compare(report, nv, target, kind, staging.expected_count(ns, kind))

            if session.options.include_custom_resources:
                for crd in staging.custom_resource_names(ns):
                    self._compare(report, nv, target, crd, staging.count_items(staging.custom_path(ns, crd)))

            self._check_pods(report, nv, target)

        Log.ok(self.logger, f"Verification completed ({len(report.warnings)} warning(s))")
        return report
