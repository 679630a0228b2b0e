# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/cli/args/__init__.py
"""
Argument parser modules for the kube2kube CLI.
"""
from __future__ import annotations

from .builder import HelpFormatter, _build_epilog
from .groups import (
    _add_cluster_endpoints,
    _add_global_config_logging,
    _add_operation_flags,
    _add_selection,
    _add_storage,
    _add_target_creation,
)
from .helpers import _merged_get, _require
from .parser import _build_preparser, _load_merged_config, build_parser, parse_args_with_config
from .validators import validate_args

__all__ = [
    # Builder
    "HelpFormatter",
    "_build_epilog",
    # Groups
    "_add_cluster_endpoints",
    "_add_global_config_logging",
    "_add_operation_flags",
    "_add_selection",
    "_add_storage",
    "_add_target_creation",
    # Helpers
    "_merged_get",
    "_require",
    # Parser
    "_build_preparser",
    "_load_merged_config",
    "build_parser",
    "parse_args_with_config",
    # Validators
    "validate_args",
]
