# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""Cluster provider conventions and provider-CLI operations."""

from __future__ import annotations

from .cluster_creator import ClusterCreator
from .conventions import PROVIDER_TOOLS, local_context_name, match_contexts

__all__ = ["ClusterCreator", "PROVIDER_TOOLS", "local_context_name", "match_contexts"]
