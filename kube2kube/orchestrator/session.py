# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/session.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from ..core.logger import Log
from ..kube.models import ClusterEndpoint
from .staging import StagingArea

DEFAULT_RESOURCES: Tuple[str, ...] = (
    "deployments",
    "statefulsets",
    "daemonsets",
    "configmaps",
    "secrets",
    "services",
    "ingresses",
    "horizontalpodautoscalers",
    "pvc",
)

DEFAULT_EXCLUDED_NAMESPACES: Tuple[str, ...] = ("kube-system", "kube-public", "kube-node-lease")

PVC_KINDS = frozenset({"pvc", "pvcs", "persistentvolumeclaim", "persistentvolumeclaims"})


def is_pvc_kind(kind: str) -> bool:
    return kind.strip().lower() in PVC_KINDS


@dataclass
class MigrationOptions:
    dry_run: bool = False
    include_custom_resources: bool = True
    transfer_storage: bool = False
    recreate_pvcs: bool = False
    timeout_s: float = 600
    crd_settle_s: float = 10
    keep_staging: bool = False

    @property
    def migrate_pvcs(self) -> bool:
        """Claims are only replayed when data transfer or empty recreation was asked for."""
        return self.transfer_storage or self.recreate_pvcs


@dataclass
class MigrationSession:
    source: Optional[ClusterEndpoint]
    target: ClusterEndpoint
    staging: StagingArea
    options: MigrationOptions = field(default_factory=MigrationOptions)
    resources: Tuple[str, ...] = DEFAULT_RESOURCES
    namespaces: Tuple[str, ...] = ()
    warnings: List[str] = field(default_factory=list)

    def warn(self, logger: Any, msg: str, **ctx: Any) -> None:
        """Record a non-fatal problem for the final summary and log it."""
        self.warnings.append(msg)
        Log.warn(logger, msg, **ctx)

    @property
    def dry_run(self) -> bool:
        return self.options.dry_run
