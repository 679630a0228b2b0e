# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/kind_graph.py
"""
Import ordering for built-in resource kinds.

Kinds are grouped into categories and the categories form a DAG:

    config -> storage -> network -> compute -> {ingress, autoscaling, other} -> custom

Workloads reference configmaps/secrets, claims and services at admission
time, so everything a category depends on is applied before it. New kinds are
placed by naming their category; unknown kinds land in `other`.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, Set


class KindCategory(str, Enum):
    CONFIG = "config"
    STORAGE = "storage"
    NETWORK = "network"
    COMPUTE = "compute"
    INGRESS = "ingress"
    AUTOSCALING = "autoscaling"
    OTHER = "other"
    CUSTOM = "custom"


# category -> categories that must be applied first
DEFAULT_DEPENDENCIES: Dict[KindCategory, Set[KindCategory]] = {
    KindCategory.CONFIG: set(),
    KindCategory.STORAGE: {KindCategory.CONFIG},
    KindCategory.NETWORK: {KindCategory.STORAGE},
    KindCategory.COMPUTE: {KindCategory.NETWORK},
    KindCategory.INGRESS: {KindCategory.COMPUTE},
    KindCategory.AUTOSCALING: {KindCategory.COMPUTE},
    KindCategory.OTHER: {KindCategory.COMPUTE},
    KindCategory.CUSTOM: {KindCategory.INGRESS, KindCategory.AUTOSCALING, KindCategory.OTHER},
}

# Canonical kind names in their within-category order, with common aliases.
DEFAULT_KINDS: Dict[str, KindCategory] = {
    "configmaps": KindCategory.CONFIG,
    "configmap": KindCategory.CONFIG,
    "cm": KindCategory.CONFIG,
    "secrets": KindCategory.CONFIG,
    "secret": KindCategory.CONFIG,
    "serviceaccounts": KindCategory.CONFIG,
    "sa": KindCategory.CONFIG,
    "pvc": KindCategory.STORAGE,
    "pvcs": KindCategory.STORAGE,
    "persistentvolumeclaims": KindCategory.STORAGE,
    "persistentvolumeclaim": KindCategory.STORAGE,
    "services": KindCategory.NETWORK,
    "service": KindCategory.NETWORK,
    "svc": KindCategory.NETWORK,
    "deployments": KindCategory.COMPUTE,
    "deployment": KindCategory.COMPUTE,
    "deploy": KindCategory.COMPUTE,
    "statefulsets": KindCategory.COMPUTE,
    "statefulset": KindCategory.COMPUTE,
    "sts": KindCategory.COMPUTE,
    "daemonsets": KindCategory.COMPUTE,
    "daemonset": KindCategory.COMPUTE,
    "ds": KindCategory.COMPUTE,
    "jobs": KindCategory.COMPUTE,
    "cronjobs": KindCategory.COMPUTE,
    "ingresses": KindCategory.INGRESS,
    "ingress": KindCategory.INGRESS,
    "ing": KindCategory.INGRESS,
    "horizontalpodautoscalers": KindCategory.AUTOSCALING,
    "horizontalpodautoscaler": KindCategory.AUTOSCALING,
    "hpa": KindCategory.AUTOSCALING,
}


class CycleError(ValueError):
    pass


class KindGraph:
    def __init__(
        self,
        kinds: Optional[Dict[str, KindCategory]] = None,
        dependencies: Optional[Dict[KindCategory, Set[KindCategory]]] = None,
    ):
        self._kinds: Dict[str, KindCategory] = dict(DEFAULT_KINDS if kinds is None else kinds)
        deps = DEFAULT_DEPENDENCIES if dependencies is None else dependencies
        self._deps: Dict[KindCategory, Set[KindCategory]] = {c: set(deps.get(c, set())) for c in KindCategory}

    def add_kind(self, kind: str, category: KindCategory) -> None:
        self._kinds[kind.strip().lower()] = category

    def add_dependency(self, category: KindCategory, depends_on: KindCategory) -> None:
        self._deps[category].add(depends_on)

    def category_of(self, kind: str) -> KindCategory:
        return self._kinds.get(kind.strip().lower(), KindCategory.OTHER)

    def category_order(self) -> List[KindCategory]:
        """
        Kahn's algorithm; among ready categories the enum declaration order wins,
        so the result is stable.
        """
        rank = {c: i for i, c in enumerate(KindCategory)}
        remaining = {c: set(d) for c, d in self._deps.items()}
        order: List[KindCategory] = []

        while remaining:
            ready = sorted((c for c, d in remaining.items() if not d), key=rank.__getitem__)
            if not ready:
                raise CycleError(f"kind category dependencies form a cycle: {sorted(c.value for c in remaining)}")
            nxt = ready[0]
            order.append(nxt)
            del remaining[nxt]
            for d in remaining.values():
                d.discard(nxt)
        return order

    def order(self, kinds: Iterable[str]) -> List[str]:
        """
        Sort `kinds` into apply order: by category position, then by canonical
        position among known kinds, then by input order. Duplicates are dropped.
        """
        cat_pos = {c: i for i, c in enumerate(self.category_order())}
        known_pos = {k: i for i, k in enumerate(self._kinds)}

        seen: Set[str] = set()
        unique: List[str] = []
        for k in kinds:
            if k not in seen:
                seen.add(k)
                unique.append(k)

        def key(item):
            idx, kind = item
            norm = kind.strip().lower()
            return (cat_pos[self.category_of(kind)], known_pos.get(norm, len(known_pos)), idx)

        return [k for _, k in sorted(enumerate(unique), key=key)]
