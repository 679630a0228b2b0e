#!/usr/bin/env python3
# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Example: drive the pipeline stages directly.

Exports a namespace from one cluster into a directory, sanitizes it, and replays
it into another cluster later (e.g. after the directory was reviewed or copied
to another machine).

Usage:
    python library_staged_import.py export minikube:dev web /backups/web
    python library_staged_import.py import kind:prod web /backups/web
"""

import logging
import sys
from pathlib import Path

from kube2kube import KubectlClient
from kube2kube.orchestrator import (
    ClusterEndpointResolver,
    ManifestSanitizer,
    MigrationSession,
    ResourceExporter,
    ResourceImporter,
    StagingArea,
)

logging.basicConfig(level=logging.INFO, format='%(levelname)s %(message)s')
logger = logging.getLogger(__name__)


def main():
    if len(sys.argv) != 5 or sys.argv[1] not in ("export", "import"):
        print(__doc__)
        sys.exit(1)

    mode, endpoint, namespace, directory = sys.argv[1:]
    provider, cluster = endpoint.split(":", 1)

    client = KubectlClient(logger)
    ep = ClusterEndpointResolver(logger, client).resolve(provider, cluster)
    staging = StagingArea(Path(directory))

    if mode == "export":
        session = MigrationSession(source=ep, target=ep, staging=staging, namespaces=(namespace,))
        ResourceExporter(logger, client).export(session)
        ManifestSanitizer(logger).sanitize(session)
    else:
        staging.scan()
        session = MigrationSession(source=None, target=ep, staging=staging, namespaces=(namespace,))
        result = ResourceImporter(logger, client).import_(session)
        logger.info(f"Applied {len(result.applied)} file(s)")

    for w in session.warnings:
        logger.warning(w)
    sys.exit(1 if session.warnings else 0)


if __name__ == '__main__':
    main()
