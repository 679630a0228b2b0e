# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/__init__.py
"""
Migration pipeline components.

Each stage is a small class taking (logger, client) so it can be driven by the
MigrationOrchestrator or used on its own against any ControlPlaneClient.
"""

from .endpoint_resolver import ClusterEndpointResolver
from .kind_graph import KindCategory, KindGraph
from .manifest_sanitizer import ManifestSanitizer
from .migration_verifier import KindCount, MigrationVerifier, VerificationReport
from .namespace_selector import NamespaceSelector
from .orchestrator import MigrationOrchestrator
from .resource_exporter import ResourceExporter
from .resource_importer import ImportResult, ResourceImporter
from .session import MigrationOptions, MigrationSession
from .staging import StagingArea

__all__ = [
    "MigrationOrchestrator",
    "ClusterEndpointResolver",
    "NamespaceSelector",
    "ResourceExporter",
    "ManifestSanitizer",
    "ResourceImporter",
    "ImportResult",
    "MigrationVerifier",
    "VerificationReport",
    "KindCount",
    "KindGraph",
    "KindCategory",
    "MigrationOptions",
    "MigrationSession",
    "StagingArea",
]
