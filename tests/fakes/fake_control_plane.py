# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-memory ControlPlaneClient used by pipeline tests."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml

from kube2kube.core.exceptions import KubectlError
from kube2kube.kube.client import ControlPlaneClient
from kube2kube.kube.models import ClusterEndpoint, empty_list_document, list_items

# document kind -> list name used by the pipeline
KIND_NAMES = {
    "ConfigMap": "configmaps",
    "Secret": "secrets",
    "PersistentVolumeClaim": "pvc",
    "Service": "services",
    "Deployment": "deployments",
    "StatefulSet": "statefulsets",
    "DaemonSet": "daemonsets",
    "Ingress": "ingresses",
    "HorizontalPodAutoscaler": "horizontalpodautoscalers",
    "Job": "jobs",
    "CustomResourceDefinition": "customresourcedefinitions",
}

ALIASES = {"persistentvolumeclaims": "pvc", "pvcs": "pvc", "crd": "customresourcedefinitions"}


def k8s_object(kind: str, name: str, namespace: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """An object as the API server returns it, server-populated fields included."""
    meta: Dict[str, Any] = {
        "name": name,
        "uid": f"uid-{kind.lower()}-{name}",
        "resourceVersion": "12345",
        "creationTimestamp": "2024-01-01T00:00:00Z",
        "generation": 1,
        "managedFields": [{"manager": "kubectl"}],
        "annotations": {"kubectl.kubernetes.io/last-applied-configuration": "{}"},
    }
    if namespace:
        meta["namespace"] = namespace
    obj: Dict[str, Any] = {"apiVersion": "v1", "kind": kind, "metadata": meta, "status": {"phase": "Active"}}
    obj.update(extra)
    return obj


def kubectl_error(msg: str, *, not_found: bool = False) -> KubectlError:
    return KubectlError(code=40, msg=msg, context={"not_found": not_found})


@dataclass
class FakeCluster:
    reachable: bool = True
    namespaces: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    # (namespace or None, list name) -> {object name: object}
    objects: Dict[Tuple[Optional[str], str], Dict[str, Dict[str, Any]]] = field(default_factory=dict)
    pods: Dict[str, List[str]] = field(default_factory=dict)

    def add_namespace(self, name: str) -> None:
        self.namespaces[name] = k8s_object("Namespace", name, spec={"finalizers": ["kubernetes"]})

    def add(self, list_name: str, obj: Dict[str, Any]) -> None:
        ns = (obj.get("metadata") or {}).get("namespace")
        self.objects.setdefault((ns, list_name), {})[obj["metadata"]["name"]] = obj

    def items(self, list_name: str, namespace: Optional[str]) -> List[Dict[str, Any]]:
        return list(self.objects.get((namespace, list_name), {}).values())


class FakeControlPlane(ControlPlaneClient):
    def __init__(self) -> None:
        self.clusters: Dict[str, FakeCluster] = {}
        self.custom_kinds: Dict[str, str] = {}
        self.failures: Set[Tuple[str, ...]] = set()
        self.calls: List[Tuple[str, ...]] = []

    # -- setup ---------------------------------------------------------

    def cluster(self, context: str) -> FakeCluster:
        return self.clusters.setdefault(context, FakeCluster())

    def register_custom_kind(self, kind: str, crd_name: str) -> None:
        self.custom_kinds[kind] = crd_name

    def fail(self, op: str, *key: str) -> None:
        """Make `op` raise for the given (context, arg...) key."""
        self.failures.add((op,) + key)

    @property
    def mutations(self) -> List[Tuple[str, ...]]:
        return [c for c in self.calls if c[0] in ("apply_file", "create_namespace")]

    # -- internals -----------------------------------------------------

    def _check(self, op: str, *key: str) -> None:
        self.calls.append((op,) + key)
        for i in range(len(key) + 1):
            if (op,) + key[:i] in self.failures:
                raise kubectl_error(f"injected failure: {op} {' '.join(key)}")

    def _reach(self, endpoint: ClusterEndpoint) -> FakeCluster:
        c = self.clusters.get(endpoint.context)
        if c is None or not c.reachable:
            raise kubectl_error(f"Unable to connect to the server (context {endpoint.context})")
        return c

    def _list_name(self, kind: str) -> str:
        k = kind.strip().lower()
        return ALIASES.get(k, k)

    def _list_name_for(self, obj: Dict[str, Any]) -> str:
        kind = str(obj.get("kind") or "")
        if kind in self.custom_kinds:
            return self.custom_kinds[kind]
        if kind in KIND_NAMES:
            return KIND_NAMES[kind]
        raise kubectl_error(f'no matches for kind "{kind}"')

    # -- ControlPlaneClient ----------------------------------------------

    def list_contexts(self, kubeconfig: Optional[str] = None) -> List[str]:
        self._check("list_contexts", str(kubeconfig))
        return list(self.clusters)

    def ping(self, endpoint: ClusterEndpoint) -> None:
        self._check("ping", endpoint.context)
        self._reach(endpoint)

    def list_namespaces(self, endpoint: ClusterEndpoint) -> List[str]:
        self._check("list_namespaces", endpoint.context)
        return list(self._reach(endpoint).namespaces)

    def get_namespace(self, endpoint: ClusterEndpoint, name: str) -> Dict[str, Any]:
        self._check("get_namespace", endpoint.context, name)
        c = self._reach(endpoint)
        if name not in c.namespaces:
            raise kubectl_error(f'namespaces "{name}" not found', not_found=True)
        return copy.deepcopy(c.namespaces[name])

    def list_resources(self, endpoint: ClusterEndpoint, kind: str, namespace: Optional[str]) -> Dict[str, Any]:
        self._check("list_resources", endpoint.context, kind, str(namespace))
        c = self._reach(endpoint)
        return empty_list_document(copy.deepcopy(c.items(self._list_name(kind), namespace)))

    def apply_file(self, endpoint: ClusterEndpoint, path: Path) -> None:
        self._check("apply_file", endpoint.context, Path(path).name)
        c = self._reach(endpoint)
        with open(path, "r", encoding="utf-8") as f:
            doc = yaml.safe_load(f)
        objs = list_items(doc) if isinstance(doc, dict) and "items" in doc else [doc]
        for obj in objs:
            if obj.get("kind") == "Namespace":
                c.namespaces[obj["metadata"]["name"]] = copy.deepcopy(obj)
                continue
            list_name = self._list_name_for(obj)
            ns = (obj.get("metadata") or {}).get("namespace")
            if ns and ns not in c.namespaces:
                raise kubectl_error(f'namespaces "{ns}" not found', not_found=True)
            c.add(list_name, copy.deepcopy(obj))

    def create_namespace(self, endpoint: ClusterEndpoint, name: str) -> None:
        self._check("create_namespace", endpoint.context, name)
        c = self._reach(endpoint)
        if name in c.namespaces:
            raise kubectl_error(f'namespaces "{name}" already exists')
        c.namespaces[name] = {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": name}}

    def namespace_exists(self, endpoint: ClusterEndpoint, name: str) -> bool:
        self._check("namespace_exists", endpoint.context, name)
        return name in self._reach(endpoint).namespaces

    def pod_phases(self, endpoint: ClusterEndpoint, namespace: str) -> List[str]:
        self._check("pod_phases", endpoint.context, namespace)
        return list(self._reach(endpoint).pods.get(namespace, []))


def seed_source(plane: FakeControlPlane, context: str = "dev") -> FakeCluster:
    """
    A small but realistic source cluster:
      web:     2 deployments, 1 configmap, 1 secret, 1 service, 1 pvc, 1 widget
      batch:   1 configmap
      kube-system: 1 configmap (never migrated by default)
    plus one custom and one built-in CRD.
    """
    c = plane.cluster(context)
    for ns in ("default", "web", "batch", "kube-system"):
        c.add_namespace(ns)

    c.add("deployments", k8s_object("Deployment", "api", "web", spec={"replicas": 2}))
    c.add("deployments", k8s_object("Deployment", "frontend", "web", spec={"replicas": 1}))
    c.add("configmaps", k8s_object("ConfigMap", "settings", "web", data={"LOG_LEVEL": "info"}))
    c.add("secrets", k8s_object("Secret", "creds", "web", data={"token": "c2VjcmV0"}))
    c.add(
        "services",
        k8s_object("Service", "api", "web", spec={"clusterIP": "10.0.0.12", "clusterIPs": ["10.0.0.12"], "ports": [{"port": 80}]}),
    )
    pvc = k8s_object("PersistentVolumeClaim", "data", "web", spec={"volumeName": "pv-123", "resources": {}})
    pvc["metadata"]["annotations"]["pv.kubernetes.io/bind-completed"] = "yes"
    c.add("pvc", pvc)
    c.add("configmaps", k8s_object("ConfigMap", "jobs", "batch"))
    c.add("configmaps", k8s_object("ConfigMap", "coredns", "kube-system"))

    crd = k8s_object("CustomResourceDefinition", "widgets.example.com")
    crd["apiVersion"] = "apiextensions.k8s.io/v1"
    c.add("customresourcedefinitions", crd)
    c.add("customresourcedefinitions", k8s_object("CustomResourceDefinition", "ingressclassparams.networking.k8s.io"))
    plane.register_custom_kind("Widget", "widgets.example.com")
    widget = k8s_object("Widget", "blue", "web", spec={"size": 3})
    widget["apiVersion"] = "example.com/v1"
    c.add("widgets.example.com", widget)

    c.pods["web"] = ["Running", "Running"]
    return c
