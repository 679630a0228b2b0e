# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/storage_guidance.py
"""
Persistent-volume data is never copied. When storage transfer is requested the
operator gets guidance for the provider combination instead.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from ..core.logger import Log
from ..kube.models import Provider

_GUIDANCE: Dict[str, Tuple[str, List[str]]] = {
    "local": (
        "Both clusters are local. For local clusters, consider the following approaches:",
        [
            "For minikube: Use hostPath volumes and ensure they point to the same host directory.",
            "For kind/k3d: Use Docker volumes and bind them to the same host directory.",
            "For any local cluster: Set up a local NFS or MinIO server for storage.",
        ],
    ),
    "cloud": (
        "Both clusters are cloud-based. For cloud clusters, consider the following approaches:",
        [
            "Use cloud-native storage options (EBS, Persistent Disk, Azure Disk).",
            "Set up storage replication at the cloud provider level.",
            "Use a backup/restore solution like Velero.",
        ],
    ),
    "mixed": (
        "Transferring between local and cloud clusters. For mixed environments, consider:",
        [
            "Use S3-compatible storage that both clusters can access.",
            "Set up temporary replication through an intermediary service.",
            "Use a backup/restore solution like Velero.",
        ],
    ),
}

_LABELS = {"local": "local clusters", "cloud": "cloud clusters", "mixed": "local and cloud clusters"}


def combination(source: Provider, target: Provider) -> str:
    if source.is_local and target.is_local:
        return "local"
    if not source.is_local and not target.is_local:
        return "cloud"
    return "mixed"


def log_storage_guidance(logger: logging.Logger, source: Provider, target: Provider, *, dry_run: bool = False) -> str:
    """Log transfer guidance for the provider pair; returns the combination key."""
    combo = combination(source, target)
    if dry_run:
        Log.dry_run(logger, "Would transfer persistent volume data between clusters")
        return combo

    Log.step(logger, "Starting storage data transfer between clusters...")
    logger.warning("Storage transfer is a complex operation that depends on many factors.")

    headline, tips = _GUIDANCE[combo]
    logger.info(headline)
    for i, tip in enumerate(tips, 1):
        logger.info("%d. %s", i, tip)

    logger.warning("Automated data transfer between %s is not implemented.", _LABELS[combo])
    logger.warning("Please see the documentation for manual steps.")
    logger.info("For production workloads, consider using a dedicated migration tool like Velero.")
    return combo
