# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/__init__.py
"""
kube2kube - Cross-provider Kubernetes resource migration

Moves the workloads of selected namespaces from one cluster to another
(minikube, kind, k3d, EKS, GKE, AKS in any combination): export, sanitize,
ordered import and verification.

Usage as a library:

    from kube2kube import KubectlClient, MigrationOrchestrator
    from kube2kube.cli import parse_args_with_config

    args, _conf, logger = parse_args_with_config([
        "--source-provider", "kind", "--source-cluster", "old",
        "--target-provider", "k3d", "--target-cluster", "new",
        "--namespace", "web",
    ])
    rc = MigrationOrchestrator(logger, args, client=KubectlClient(logger)).run()
"""

__version__ = "0.1.0"

from .kube import ClusterEndpoint, ControlPlaneClient, KubectlClient, Provider
from .orchestrator import MigrationOrchestrator

__all__ = [
    # Version
    "__version__",

    # Orchestration
    "MigrationOrchestrator",

    # Cluster access
    "ClusterEndpoint",
    "ControlPlaneClient",
    "KubectlClient",
    "Provider",
]
