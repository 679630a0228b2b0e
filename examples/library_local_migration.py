#!/usr/bin/env python3
# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Example: migrate namespaces between two local clusters using the kube2kube library.

This example demonstrates:
- Resolving source and target clusters by provider naming convention
- Exporting, sanitizing and importing selected namespaces
- Reading the verification report afterwards

Usage:
    python library_local_migration.py kind:old k3d:new web [batch ...]
"""

import logging
import sys

from kube2kube import KubectlClient, MigrationOrchestrator
from kube2kube.cli import parse_args_with_config

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def migrate(source: str, target: str, namespaces):
    """Run a migration and return the orchestrator for inspection."""
    src_provider, src_cluster = source.split(":", 1)
    dst_provider, dst_cluster = target.split(":", 1)

    argv = [
        "--source-provider", src_provider, "--source-cluster", src_cluster,
        "--target-provider", dst_provider, "--target-cluster", dst_cluster,
        "--keep-staging",
    ]
    for ns in namespaces:
        argv += ["--namespace", ns]

    args, _conf, _ = parse_args_with_config(argv, logger=logger)
    orchestrator = MigrationOrchestrator(logger, args, client=KubectlClient(logger, timeout_s=args.timeout))
    orchestrator.run()
    return orchestrator


def main():
    """Main entry point."""

    if len(sys.argv) < 4:
        print(f"Usage: {sys.argv[0]} <provider:cluster> <provider:cluster> <namespace> [namespace ...]")
        print()
        print("Example:")
        print(f"  {sys.argv[0]} minikube:dev kind:staging web batch")
        sys.exit(1)

    try:
        orchestrator = migrate(sys.argv[1], sys.argv[2], sys.argv[3:])
    except Exception as e:
        logger.error(f"✗ Migration failed: {e}")
        sys.exit(1)

    for ns, result in orchestrator.verification.namespaces.items():
        running, total = result.pods
        logger.info(f"  {ns}: {len(result.kinds)} kinds checked, {running}/{total} pods running")

    logger.info(f"Staged manifests kept in {orchestrator.session.staging.root}")
    sys.exit(0)


if __name__ == '__main__':
    main()
