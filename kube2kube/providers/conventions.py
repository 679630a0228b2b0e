# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/providers/conventions.py

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

from ..kube.models import Provider

# CLI each provider needs on PATH.
PROVIDER_TOOLS: Dict[Provider, str] = {
    Provider.MINIKUBE: "minikube",
    Provider.KIND: "kind",
    Provider.K3D: "k3d",
    Provider.EKS: "aws",
    Provider.GKE: "gcloud",
    Provider.AKS: "az",
}

PROVIDER_TOOL_LABELS: Dict[Provider, str] = {
    Provider.MINIKUBE: "minikube",
    Provider.KIND: "kind",
    Provider.K3D: "k3d",
    Provider.EKS: "AWS CLI",
    Provider.GKE: "Google Cloud SDK",
    Provider.AKS: "Azure CLI",
}


def local_context_name(provider: Provider, cluster: str) -> Optional[str]:
    """kubeconfig context name local providers write for `cluster`; None for hosted ones."""
    if provider is Provider.MINIKUBE:
        return cluster
    if provider is Provider.KIND:
        return f"kind-{cluster}"
    if provider is Provider.K3D:
        return f"k3d-{cluster}"
    return None


def match_contexts(provider: Provider, cluster: str, contexts: Sequence[str]) -> List[str]:
    """
    Candidate contexts for `cluster` under the provider's naming convention.

    Local providers: exact derived name.
    eks: ARN-shaped contexts mentioning the cluster, else any containing it.
    gke: gke_<project>_<zone>_<cluster> style contexts.
    aks: any context containing the cluster name.
    """
    local = local_context_name(provider, cluster)
    if local is not None:
        return [c for c in contexts if c == local]

    needle = re.escape(cluster)
    if provider is Provider.EKS:
        arn = [c for c in contexts if re.search(rf"^arn:aws:eks.*{needle}", c)]
        if arn:
            return arn
        return [c for c in contexts if cluster in c]
    if provider is Provider.GKE:
        return [c for c in contexts if re.search(rf"gke.*{needle}", c)]
    return [c for c in contexts if cluster in c]
