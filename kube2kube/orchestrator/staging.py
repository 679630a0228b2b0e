# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/staging.py
"""
On-disk staging area shared by export, sanitize and import.

Layout (kept stable so partially completed migrations can be resumed):

    <root>/crds.yaml
    <root>/<namespace>/namespace.yaml
    <root>/<namespace>/<kind>.yaml
    <root>/<namespace>/custom-resources/<crd-name>.yaml

A kind file only exists when the source had at least one instance; a
re-export into an existing tree prunes files the run did not rewrite.
In dry-run mode nothing is written; counts are kept in `inventory` instead.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import yaml

from ..core.utils import U
from ..kube.models import list_items

CRDS_FILE = "crds.yaml"
NAMESPACE_FILE = "namespace.yaml"
CUSTOM_RESOURCES_DIR = "custom-resources"
BACKUP_SUFFIX = ".bak"

# inventory keys: (namespace or None, kind); custom resources use "cr/<crd-name>"
InventoryKey = Tuple[Optional[str], str]


def custom_key(crd: str) -> str:
    return f"cr/{crd}"


class StagingArea:
    def __init__(self, root: Path, *, dry_run: bool = False):
        self.root = Path(root)
        self.dry_run = dry_run
        self.inventory: Dict[InventoryKey, int] = {}
        self.planned: List[str] = []
        self.written: Set[Path] = set()

    # ------------------------------------------------------------------
    # paths
    # ------------------------------------------------------------------

    @property
    def crds_path(self) -> Path:
        return self.root / CRDS_FILE

    def namespace_dir(self, namespace: str) -> Path:
        return self.root / namespace

    def namespace_path(self, namespace: str) -> Path:
        return self.namespace_dir(namespace) / NAMESPACE_FILE

    def kind_path(self, namespace: str, kind: str) -> Path:
        return self.namespace_dir(namespace) / f"{kind}.yaml"

    def custom_dir(self, namespace: str) -> Path:
        return self.namespace_dir(namespace) / CUSTOM_RESOURCES_DIR

    def custom_path(self, namespace: str, crd: str) -> Path:
        return self.custom_dir(namespace) / f"{crd}.yaml"

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        return self.root.is_dir()

    def ensure(self) -> None:
        if not self.dry_run:
            U.ensure_dir(self.root)

    def ensure_namespace(self, namespace: str) -> None:
        if namespace not in self.planned:
            self.planned.append(namespace)
        if not self.dry_run:
            U.ensure_dir(self.namespace_dir(namespace))

    def scan(self) -> None:
        """Rebuild `planned` and `inventory` from an existing tree."""
        if self.crds_path.is_file():
            self.record(None, "customresourcedefinitions", self.count_items(self.crds_path))
        for ns_dir in self.namespace_dirs():
            ns = ns_dir.name
            if ns not in self.planned:
                self.planned.append(ns)
            if (ns_dir / NAMESPACE_FILE).is_file():
                self.record(ns, "namespace", 1)
            for kind, path in self.kind_files(ns).items():
                self.record(ns, kind, self.count_items(path))
            for path in self.custom_resource_files(ns):
                self.record(ns, custom_key(path.stem), self.count_items(path))

    def prune_namespace(self, namespace: str) -> List[Path]:
        """Delete kind and custom resource files of `namespace` not written by this run."""
        if self.dry_run:
            return []
        stale = [
            p
            for p in list(self.kind_files(namespace).values()) + self.custom_resource_files(namespace)
            if p not in self.written
        ]
        for p in stale:
            U.safe_unlink(p)
        return stale

    def prune_crds(self) -> bool:
        if self.dry_run or self.crds_path in self.written or not self.crds_path.is_file():
            return False
        U.safe_unlink(self.crds_path)
        return True

    def remove(self) -> None:
        if not self.dry_run and self.root.exists():
            shutil.rmtree(self.root)

    # ------------------------------------------------------------------
    # read/write
    # ------------------------------------------------------------------

    def record(self, namespace: Optional[str], kind: str, count: int) -> None:
        self.inventory[(namespace, kind)] = int(count)

    def write_document(self, path: Path, doc: Dict[str, Any]) -> None:
        if self.dry_run:
            return
        text = yaml.safe_dump(doc, sort_keys=False, default_flow_style=False, allow_unicode=True)
        U.atomic_write_text(path, text)
        self.written.add(path)

    @staticmethod
    def read_document(path: Path) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)

    def count_items(self, path: Path) -> int:
        if not path.is_file():
            return 0
        doc = self.read_document(path)
        if isinstance(doc, dict) and "items" in doc:
            return len(list_items(doc))
        return 1 if isinstance(doc, dict) else 0

    def expected_count(self, namespace: str, kind: str) -> int:
        """Exported instance count: from disk, or from the inventory in dry-run."""
        if self.dry_run:
            return self.inventory.get((namespace, kind), 0)
        return self.count_items(self.kind_path(namespace, kind))

    # ------------------------------------------------------------------
    # enumeration
    # ------------------------------------------------------------------

    def namespace_dirs(self) -> List[Path]:
        if not self.exists():
            return []
        return sorted(p for p in self.root.iterdir() if p.is_dir())

    def kind_files(self, namespace: str) -> Dict[str, Path]:
        d = self.namespace_dir(namespace)
        if not d.is_dir():
            return {}
        return {
            p.stem: p
            for p in sorted(d.glob("*.yaml"))
            if p.is_file() and p.name != NAMESPACE_FILE
        }

    def staged_kinds(self, namespace: str) -> List[str]:
        """Built-in kinds with a staged collection for `namespace`."""
        if self.dry_run:
            return [
                k for (ns, k) in self.inventory
                if ns == namespace and k != "namespace" and not k.startswith("cr/")
            ]
        return list(self.kind_files(namespace))

    def has_namespace(self, namespace: str) -> bool:
        if self.dry_run:
            return namespace in self.planned
        return self.namespace_dir(namespace).is_dir()

    def has_namespace_definition(self, namespace: str) -> bool:
        if self.dry_run:
            return (namespace, "namespace") in self.inventory
        return self.namespace_path(namespace).is_file()

    def has_crds(self) -> bool:
        if self.dry_run:
            return self.inventory.get((None, "customresourcedefinitions"), 0) > 0
        return self.crds_path.is_file()

    def custom_resource_files(self, namespace: str) -> List[Path]:
        d = self.custom_dir(namespace)
        if not d.is_dir():
            return []
        return sorted(p for p in d.glob("*.yaml") if p.is_file())

    def custom_resource_names(self, namespace: str) -> List[str]:
        if self.dry_run:
            return sorted(
                k[len("cr/"):] for (ns, k) in self.inventory if ns == namespace and k.startswith("cr/")
            )
        return [p.stem for p in self.custom_resource_files(namespace)]

    def iter_manifest_files(self) -> Iterator[Path]:
        """Every staged manifest file, CRDs first, then per namespace."""
        if self.crds_path.is_file():
            yield self.crds_path
        for ns_dir in self.namespace_dirs():
            ns_file = ns_dir / NAMESPACE_FILE
            if ns_file.is_file():
                yield ns_file
            yield from self.kind_files(ns_dir.name).values()
            yield from self.custom_resource_files(ns_dir.name)
