# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/providers/cluster_creator.py

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

from ..core.exceptions import Fatal, wrap_provider
from ..core.logger import Log
from ..core.utils import U
from ..kube.models import Provider
from .conventions import local_context_name


def version_flags(logger: logging.Logger, provider: Provider, version: Optional[str]) -> List[str]:
    if not version:
        return []
    if provider is Provider.MINIKUBE:
        return [f"--kubernetes-version={version}"]
    if provider is Provider.KIND:
        # kind pins versions through node images, not a version flag.
        Log.warn(logger, "kind doesn't support direct Kubernetes version selection. Using default version.")
        return []
    if provider is Provider.K3D:
        return [f"--image=rancher/k3s:v{version}-k3s1"]
    if provider is Provider.GKE:
        return [f"--cluster-version={version}"]
    return [f"--kubernetes-version={version}"]


class ClusterCreator:
    """
    Provider CLI capability: create a target cluster.
    Only local providers are supported; hosted clusters must be created out of band.
    """

    def __init__(self, logger: logging.Logger, *, timeout_s: Optional[float] = None):
        self.logger = logger
        self.timeout_s = timeout_s

    def build_command(self, provider: Provider, name: str, nodes: int, version: Optional[str]) -> List[str]:
        vflags = version_flags(self.logger, provider, version)
        if provider is Provider.MINIKUBE:
            return ["minikube", "start", "-p", name, *vflags, f"--nodes={nodes}"]
        if provider is Provider.KIND:
            return ["kind", "create", "cluster", "--name", name]
        if provider is Provider.K3D:
            return ["k3d", "cluster", "create", name, *vflags, "--agents", str(nodes)]

        hints = {
            Provider.EKS: "use eksctl",
            Provider.GKE: "use gcloud container clusters create",
            Provider.AKS: "use az aks create",
        }
        raise Fatal(
            2,
            f"Creating {provider.value.upper()} clusters is not supported; "
            f"create '{name}' manually ({hints[provider]}).",
        )

    def create(
        self,
        provider: Provider,
        name: str,
        *,
        nodes: int = 3,
        version: Optional[str] = None,
        dry_run: bool = False,
    ) -> str:
        """
        Create the cluster and return the context name the provider registers for it.
        """
        cmd = self.build_command(provider, name, nodes, version)
        context = local_context_name(provider, name) or name

        if dry_run:
            Log.dry_run(self.logger, f"Would create {provider.value} cluster '{name}' with {nodes} nodes: {U._pretty_cmd(cmd)}")
            return context

        Log.step(self.logger, f"Creating {provider.value} cluster '{name}'")
        try:
            U.run_cmd(self.logger, cmd, check=True, capture=True, timeout=self.timeout_s)
        except subprocess.CalledProcessError as e:
            err = (e.stderr or e.stdout or "").strip()
            raise wrap_provider(f"Failed to create {provider.value} cluster '{name}': {err}", e, cluster=name)
        except subprocess.TimeoutExpired as e:
            raise wrap_provider(f"Timed out creating {provider.value} cluster '{name}'", e, cluster=name)
        except FileNotFoundError as e:
            raise wrap_provider(f"{cmd[0]} not found; cannot create cluster '{name}'", e, code=5)

        Log.ok(self.logger, f"Created target cluster '{name}'")
        return context
