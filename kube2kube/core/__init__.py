# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/core/__init__.py
"""Shared infrastructure: errors, logging, command execution, pre-flight checks."""

from .exceptions import Fatal, Kube2KubeError
from .logger import Log
from .utils import U

__all__ = ["Fatal", "Kube2KubeError", "Log", "U"]
