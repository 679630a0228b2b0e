# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/kube/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class Provider(str, Enum):
    MINIKUBE = "minikube"
    KIND = "kind"
    K3D = "k3d"
    EKS = "eks"
    GKE = "gke"
    AKS = "aks"

    @property
    def is_local(self) -> bool:
        return self in (Provider.MINIKUBE, Provider.KIND, Provider.K3D)

    @classmethod
    def parse(cls, value: "str | Provider") -> "Provider":
        if isinstance(value, Provider):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unsupported provider {value!r} (supported: {choices})") from None


@dataclass(frozen=True)
class ClusterEndpoint:
    """
    A resolved control-plane identity for one side of a migration.
    `kubeconfig` is the credential handle (None = kubectl's default lookup).
    """
    provider: Provider
    cluster_name: str
    context: str
    kubeconfig: Optional[str] = None

    def describe(self) -> str:
        return f"{self.provider.value}/{self.cluster_name} (context={self.context})"


def list_items(doc: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Items of a kubectl List document; tolerates None and non-list shapes."""
    if not isinstance(doc, dict):
        return []
    items = doc.get("items")
    if not isinstance(items, list):
        return []
    return [x for x in items if isinstance(x, dict)]


def object_name(obj: Dict[str, Any]) -> str:
    return str(((obj.get("metadata") or {}).get("name")) or "")


def empty_list_document(items: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {"apiVersion": "v1", "kind": "List", "items": list(items or []), "metadata": {}}
