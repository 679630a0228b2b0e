# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/cli/__init__.py

from .args import parse_args_with_config

__all__ = ["parse_args_with_config"]
