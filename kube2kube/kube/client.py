# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/kube/client.py
"""
Control-plane client capability.

The migration pipeline never owns cluster state; it talks to clusters through a
ControlPlaneClient handed to it by the orchestrator. Every operation takes the
endpoint it acts on, so source and target calls can never leak into each other
through a shared "current context".
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.exceptions import KubectlError
from .cli import is_not_found_error, run_kubectl, run_kubectl_json
from .models import ClusterEndpoint, empty_list_document, list_items, object_name


class ControlPlaneClient(ABC):
    @abstractmethod
    def list_contexts(self, kubeconfig: Optional[str] = None) -> List[str]:
        """Context names known to the kubeconfig."""

    @abstractmethod
    def ping(self, endpoint: ClusterEndpoint) -> None:
        """Lightweight control-plane query; raises KubectlError when unreachable."""

    @abstractmethod
    def list_namespaces(self, endpoint: ClusterEndpoint) -> List[str]:
        ...

    @abstractmethod
    def get_namespace(self, endpoint: ClusterEndpoint, name: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    def list_resources(self, endpoint: ClusterEndpoint, kind: str, namespace: Optional[str]) -> Dict[str, Any]:
        """kubectl-style List document for `kind` in `namespace` (None = cluster scope)."""

    @abstractmethod
    def apply_file(self, endpoint: ClusterEndpoint, path: Path) -> None:
        ...

    @abstractmethod
    def create_namespace(self, endpoint: ClusterEndpoint, name: str) -> None:
        ...

    @abstractmethod
    def namespace_exists(self, endpoint: ClusterEndpoint, name: str) -> bool:
        ...

    @abstractmethod
    def pod_phases(self, endpoint: ClusterEndpoint, namespace: str) -> List[str]:
        ...

    # Derived operations

    def get_crds(self, endpoint: ClusterEndpoint) -> Dict[str, Any]:
        return self.list_resources(endpoint, "customresourcedefinitions", None)

    def count_resources(self, endpoint: ClusterEndpoint, kind: str, namespace: str) -> int:
        return len(list_items(self.list_resources(endpoint, kind, namespace)))


class KubectlClient(ControlPlaneClient):
    """ControlPlaneClient backed by the kubectl binary."""

    def __init__(self, logger: logging.Logger, *, timeout_s: float = 600, kubectl: str = "kubectl"):
        self.logger = logger
        self.timeout_s = timeout_s
        self.kubectl = kubectl

    def _run(self, endpoint: Optional[ClusterEndpoint], args: List[str], *, kubeconfig: Optional[str] = None) -> str:
        return run_kubectl(
            args,
            context=endpoint.context if endpoint else None,
            kubeconfig=endpoint.kubeconfig if endpoint else kubeconfig,
            timeout_s=self.timeout_s,
            logger=self.logger,
            kubectl=self.kubectl,
        )

    def _json(self, endpoint: ClusterEndpoint, args: List[str]) -> Any:
        return run_kubectl_json(
            args,
            context=endpoint.context,
            kubeconfig=endpoint.kubeconfig,
            timeout_s=self.timeout_s,
            logger=self.logger,
            kubectl=self.kubectl,
        )

    def list_contexts(self, kubeconfig: Optional[str] = None) -> List[str]:
        out = self._run(None, ["config", "get-contexts", "-o", "name"], kubeconfig=kubeconfig)
        return [ln.strip() for ln in out.splitlines() if ln.strip()]

    def ping(self, endpoint: ClusterEndpoint) -> None:
        self._run(endpoint, ["get", "nodes", "-o", "name"])

    def list_namespaces(self, endpoint: ClusterEndpoint) -> List[str]:
        doc = self._json(endpoint, ["get", "namespaces"])
        return [n for n in (object_name(o) for o in list_items(doc)) if n]

    def get_namespace(self, endpoint: ClusterEndpoint, name: str) -> Dict[str, Any]:
        return self._json(endpoint, ["get", "namespace", name]) or {}

    def list_resources(self, endpoint: ClusterEndpoint, kind: str, namespace: Optional[str]) -> Dict[str, Any]:
        args = ["get", kind]
        if namespace:
            args += ["-n", namespace]
        doc = self._json(endpoint, args)
        if not isinstance(doc, dict):
            return empty_list_document()
        if "items" not in doc:
            return empty_list_document([doc])
        return doc

    def apply_file(self, endpoint: ClusterEndpoint, path: Path) -> None:
        self._run(endpoint, ["apply", "-f", str(path)])

    def create_namespace(self, endpoint: ClusterEndpoint, name: str) -> None:
        self._run(endpoint, ["create", "namespace", name])

    def namespace_exists(self, endpoint: ClusterEndpoint, name: str) -> bool:
        try:
            self._run(endpoint, ["get", "namespace", name, "-o", "name"])
            return True
        except KubectlError as e:
            if is_not_found_error(e):
                return False
            raise

    def pod_phases(self, endpoint: ClusterEndpoint, namespace: str) -> List[str]:
        doc = self._json(endpoint, ["get", "pods", "-n", namespace])
        return [str((p.get("status") or {}).get("phase") or "Unknown") for p in list_items(doc)]
