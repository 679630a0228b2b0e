# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/cli/args/validators.py
from __future__ import annotations

import argparse
from typing import Any, Dict

from ...kube.models import Provider
from .helpers import _merged_get, _require


def _validate_endpoints(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    for side in ("source", "target"):
        prov = _merged_get(args, conf, f"{side}_provider")
        if not _require(prov):
            raise SystemExit(f"--{side}-provider is required")
        try:
            setattr(args, f"{side}_provider", Provider.parse(prov).value)
        except ValueError as e:
            raise SystemExit(f"--{side}-provider: {e}")

        if not _require(_merged_get(args, conf, f"{side}_cluster")):
            raise SystemExit(f"--{side}-cluster is required")


def _validate_numbers(args: argparse.Namespace) -> None:
    if float(getattr(args, "timeout", 600)) <= 0:
        raise SystemExit("--timeout must be > 0")
    if float(getattr(args, "crd_settle", 10)) < 0:
        raise SystemExit("--crd-settle must be >= 0")
    if int(getattr(args, "target_nodes", 3)) <= 0:
        raise SystemExit("--target-nodes must be > 0")


def _validate_selection(args: argparse.Namespace) -> None:
    if getattr(args, "no_default_resources", False) and not getattr(args, "resources", None):
        raise SystemExit("--no-default-resources needs at least one --resource")


def _validate_staging(args: argparse.Namespace) -> None:
    if getattr(args, "import_only", False) and not _require(getattr(args, "staging_dir", None)):
        raise SystemExit("--import-only requires --staging-dir")
    if getattr(args, "import_only", False) and getattr(args, "create_target", False):
        raise SystemExit("--import-only cannot be combined with --create-target")


def _validate_target_creation(args: argparse.Namespace) -> None:
    if not getattr(args, "create_target", False):
        return
    prov = Provider.parse(args.target_provider)
    if not prov.is_local:
        raise SystemExit(
            f"--create-target supports local providers only (minikube, kind, k3d), got {prov.value}"
        )


def validate_args(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    """
    Validate the final namespace. Raises SystemExit with a readable message;
    no side effects.
    """
    _validate_endpoints(args, conf)
    _validate_numbers(args)
    _validate_selection(args)
    _validate_staging(args)
    _validate_target_creation(args)
