# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""Kubernetes control-plane access for kube2kube."""

from __future__ import annotations

from .client import ControlPlaneClient, KubectlClient
from .models import ClusterEndpoint, Provider

__all__ = ["ClusterEndpoint", "ControlPlaneClient", "KubectlClient", "Provider"]
