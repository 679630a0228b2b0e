# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/manifest_sanitizer.py
"""
Strip server-populated fields from staged manifests so they can be applied to
another cluster.

Fields are removed structurally, per object, from a kind-aware denylist.
Running the sanitizer twice yields the same files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from ..core.exceptions import SanitizeError, sanitize_failed
from ..core.logger import Log
from ..core.utils import U
from ..kube.models import list_items
from .session import MigrationSession
from .staging import BACKUP_SUFFIX, StagingArea

LAST_APPLIED = "kubectl.kubernetes.io/last-applied-configuration"

METADATA_FIELDS: Tuple[str, ...] = (
    "creationTimestamp",
    "uid",
    "resourceVersion",
    "generation",
    "selfLink",
    "managedFields",
)

# kind -> (section, field) pairs removed in addition to the common ones
KIND_SPEC_FIELDS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "Service": (("spec", "clusterIP"), ("spec", "clusterIPs")),
    "Namespace": (("spec", "finalizers"),),
    "PersistentVolumeClaim": (("spec", "volumeName"),),
}

# clusterIP "None" marks a headless Service and is user-set
HEADLESS_CLUSTER_IP = "None"

KIND_ANNOTATIONS: Dict[str, Tuple[str, ...]] = {
    "PersistentVolumeClaim": (
        "pv.kubernetes.io/bind-completed",
        "pv.kubernetes.io/bound-by-controller",
    ),
}


def _is_headless_service(kind: str, obj: Dict[str, Any]) -> bool:
    spec = obj.get("spec")
    return kind == "Service" and isinstance(spec, dict) and spec.get("clusterIP") == HEADLESS_CLUSTER_IP


def sanitize_object(obj: Dict[str, Any]) -> bool:
    """Sanitize one object in place. Returns True if anything was removed."""
    if not isinstance(obj, dict):
        raise ValueError(f"expected a mapping, got {type(obj).__name__}")

    changed = False
    kind = str(obj.get("kind") or "")

    if "status" in obj:
        del obj["status"]
        changed = True

    meta = obj.get("metadata")
    if isinstance(meta, dict):
        for f in METADATA_FIELDS:
            if f in meta:
                del meta[f]
                changed = True

        ann = meta.get("annotations")
        if isinstance(ann, dict):
            for key in (LAST_APPLIED,) + KIND_ANNOTATIONS.get(kind, ()):
                if key in ann:
                    del ann[key]
                    changed = True
        if "annotations" in meta and not meta["annotations"]:
            del meta["annotations"]
            changed = True

    spec_fields = () if _is_headless_service(kind, obj) else KIND_SPEC_FIELDS.get(kind, ())
    for section, f in spec_fields:
        sec = obj.get(section)
        if isinstance(sec, dict) and f in sec:
            del sec[f]
            changed = True

    return changed


def sanitize_document(doc: Any) -> bool:
    """
    Sanitize a staged document (a List collection or a single object).
    Raises ValueError for shapes that are not manifests.
    """
    if not isinstance(doc, dict):
        raise ValueError(f"unexpected document shape: {type(doc).__name__}")

    if "items" not in doc:
        return sanitize_object(doc)

    if not isinstance(doc["items"], list):
        raise ValueError("'items' is not a list")

    changed = False
    meta = doc.get("metadata")
    if isinstance(meta, dict) and "resourceVersion" in meta:
        del meta["resourceVersion"]
        changed = True

    for item in doc["items"]:
        if sanitize_object(item):
            changed = True
    return changed


class ManifestSanitizer:
    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def sanitize_file(self, staging: StagingArea, path: Path) -> bool:
        try:
            doc = staging.read_document(path)
            changed = sanitize_document(doc)
            if changed:
                staging.write_document(path, doc)
            return changed
        except (OSError, yaml.YAMLError, ValueError) as e:
            raise sanitize_failed(f"Failed to sanitize {path}: {e}", e, path=str(path)) from e

    def _quarantine(self, session: MigrationSession, path: Path, err: SanitizeError) -> None:
        backup = Path(str(path) + BACKUP_SUFFIX)
        try:
            os.replace(str(path), str(backup))
        except OSError as e:
            session.warn(self.logger, f"{err} (could not move to {backup.name}: {e}); removing it from the import set")
            U.safe_unlink(path)
            return
        session.warn(self.logger, f"{err}; original kept as {backup.name} and excluded from import")

    def _dry_run(self, staging: StagingArea) -> None:
        planned: List[str] = []
        if staging.has_crds():
            planned.append(str(staging.crds_path))
        for (ns, kind), count in staging.inventory.items():
            if ns is None:
                continue
            if kind == "namespace":
                planned.append(str(staging.namespace_path(ns)))
            elif kind.startswith("cr/"):
                planned.append(str(staging.custom_path(ns, kind[len("cr/"):])))
            else:
                planned.append(str(staging.kind_path(ns, kind)))
        for p in planned:
            Log.dry_run(self.logger, f"Would sanitize {p}")

    def sanitize(self, session: MigrationSession) -> StagingArea:
        staging = session.staging
        Log.step(self.logger, "Cleaning up exported resources...")

        if session.dry_run:
            self._dry_run(staging)
            return staging

        files = list(staging.iter_manifest_files())
        cleaned = 0
        for path in files:
            try:
                if self.sanitize_file(staging, path):
                    cleaned += 1
                    Log.trace(self.logger, "Sanitized %s", path)
            except SanitizeError as e:
                self._quarantine(session, path, e)

        Log.ok(self.logger, f"Resource cleanup completed ({cleaned}/{len(files)} files changed)")
        return staging
