# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/cli/args/groups.py
from __future__ import annotations

import argparse

from ...kube.models import Provider
from ...orchestrator.session import DEFAULT_EXCLUDED_NAMESPACES, DEFAULT_RESOURCES

PROVIDER_CHOICES = [p.value for p in Provider]


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged normalized config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v, -vv, -vvv (trace)")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit logs as JSON lines on stderr.")


def _add_cluster_endpoints(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Source/target clusters
    # ------------------------------------------------------------------
    g = p.add_argument_group("clusters")
    for side in ("source", "target"):
        g.add_argument(
            f"--{side}-provider",
            dest=f"{side}_provider",
            default=None,
            type=str.lower,
            choices=PROVIDER_CHOICES,
            help=f"{side.capitalize()} cluster provider.",
        )
        g.add_argument(f"--{side}-cluster", dest=f"{side}_cluster", default=None, help=f"{side.capitalize()} cluster name.")
        g.add_argument(
            f"--{side}-context",
            dest=f"{side}_context",
            default=None,
            help=f"{side.capitalize()} kubeconfig context (derived from provider conventions when omitted).",
        )
        g.add_argument(
            f"--{side}-kubeconfig",
            dest=f"{side}_kubeconfig",
            default=None,
            help=f"{side.capitalize()} kubeconfig file (kubectl default when omitted).",
        )


def _add_selection(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # What to migrate
    # ------------------------------------------------------------------
    g = p.add_argument_group("selection")
    g.add_argument(
        "--namespace",
        dest="namespaces",
        action="append",
        default=[],
        help="Namespace to migrate (repeatable).",
    )
    g.add_argument("--all-namespaces", dest="all_namespaces", action="store_true", help="Migrate every source namespace.")
    g.add_argument(
        "--exclude-namespace",
        dest="exclude_namespaces",
        action="append",
        default=[],
        help=f"Namespace to skip (repeatable; always skipped: {', '.join(DEFAULT_EXCLUDED_NAMESPACES)}).",
    )
    g.add_argument(
        "--resource",
        dest="resources",
        action="append",
        default=[],
        help=f"Extra resource kind to migrate (repeatable; defaults: {', '.join(DEFAULT_RESOURCES)}).",
    )
    g.add_argument(
        "--no-default-resources",
        dest="no_default_resources",
        action="store_true",
        help="Only migrate the kinds given with --resource.",
    )
    g.add_argument(
        "--include-custom-resources",
        dest="include_custom_resources",
        action="store_true",
        help="Migrate CRDs and custom resources.",
    )
    g.add_argument(
        "--no-custom-resources",
        dest="include_custom_resources",
        action="store_false",
        help="Skip CRDs and custom resources.",
    )
    p.set_defaults(include_custom_resources=True)


def _add_storage(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("storage")
    g.add_argument(
        "--transfer-storage",
        dest="transfer_storage",
        action="store_true",
        help="Migrate PVCs and print guidance for moving volume data.",
    )
    g.add_argument(
        "--recreate-pvcs",
        dest="recreate_pvcs",
        action="store_true",
        help="Recreate PVCs (empty) on the target.",
    )


def _add_target_creation(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("target creation (local providers)")
    g.add_argument(
        "--create-target",
        dest="create_target",
        action="store_true",
        help="Create the target cluster when it cannot be resolved.",
    )
    g.add_argument("--target-nodes", dest="target_nodes", type=int, default=3, help="Node count for a created target.")
    g.add_argument(
        "--target-k8s-version",
        dest="target_k8s_version",
        default=None,
        help="Kubernetes version for a created target (e.g. 1.29.2).",
    )


def _add_operation_flags(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Run control
    # ------------------------------------------------------------------
    g = p.add_argument_group("operation")
    g.add_argument("--dry-run", dest="dry_run", action="store_true", help="Run every check; write nothing.")
    g.add_argument("--interactive", dest="interactive", action="store_true", help="Ask for confirmation before migrating.")
    g.add_argument("--force", dest="force", action="store_true", help="Skip confirmation prompts.")
    g.add_argument("--timeout", dest="timeout", type=float, default=600, help="Timeout in seconds for each cluster call.")
    g.add_argument(
        "--crd-settle",
        dest="crd_settle",
        type=float,
        default=10,
        help="Seconds to wait after applying CRDs before custom resources.",
    )
    g.add_argument(
        "--staging-dir",
        "--backup-dir",
        dest="staging_dir",
        default=None,
        help="Staging directory for exported manifests (always kept). Default: a temporary k8s-conversion-<timestamp> dir.",
    )
    g.add_argument(
        "--keep-staging",
        dest="keep_staging",
        action="store_true",
        help="Keep the temporary staging directory after a clean run.",
    )
    g.add_argument(
        "--import-only",
        dest="import_only",
        action="store_true",
        help="Skip export and import an existing --staging-dir.",
    )
    g.add_argument("--report", dest="report", default=None, help="Write a JSON run report to this path.")
