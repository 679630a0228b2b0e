# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/config/config_loader.py
"""
YAML/JSON config files for the two-phase CLI parse.

Keys are argparse dest names (source_provider, namespaces, exclude_namespaces,
...). Dashes are accepted and normalized to underscores. Multiple files are
deep-merged in order; later files win.
"""

from __future__ import annotations

import argparse
import glob
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..core.utils import U

CONFIG_SUFFIXES = (".yaml", ".yml", ".json")


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, cfgs: List[str]) -> List[Path]:
        """
        Expand globs and directories (sorted *.yaml/*.yml/*.json inside).
        A named path that does not exist is fatal.
        """
        out: List[Path] = []
        for raw in cfgs:
            s = str(Path(raw).expanduser())
            if any(ch in s for ch in "*?["):
                matches = sorted(glob.glob(s))
                if not matches:
                    logger.warning("Config glob matched nothing: %s", raw)
                out.extend(Path(m) for m in matches)
                continue

            p = Path(s)
            if p.is_dir():
                out.extend(sorted(x for x in p.iterdir() if x.is_file() and x.suffix.lower() in CONFIG_SUFFIXES))
            elif p.is_file():
                out.append(p)
            else:
                U.die(logger, f"Config file not found: {raw}", 2)

        return U.dedupe(out)

    @staticmethod
    def _normalize(d: Dict[str, Any]) -> Dict[str, Any]:
        return {str(k).replace("-", "_"): v for k, v in d.items()}

    @staticmethod
    def load_file(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        # JSON is a YAML subset, one loader covers both.
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            U.die(logger, f"Failed to load config {path}: {e}", 2)

        if data is None:
            logger.debug("Config %s is empty", path)
            return {}
        if not isinstance(data, dict):
            U.die(logger, f"Config {path} must contain a mapping at top level", 2)

        logger.debug("Loaded config %s (%d keys)", path, len(data))
        return Config._normalize(data)

    @staticmethod
    def deep_merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(base)
        for k, v in over.items():
            if isinstance(v, dict) and isinstance(out.get(k), dict):
                out[k] = Config.deep_merge(out[k], v)
            else:
                out[k] = v
        return out

    @staticmethod
    def load_many(logger: logging.Logger, paths: List[Path]) -> Dict[str, Any]:
        conf: Dict[str, Any] = {}
        for p in paths:
            conf = Config.deep_merge(conf, Config.load_file(logger, p))
        return conf

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """
        Push config values into the parser as defaults so CLI flags still win.
        Keys that match no argparse dest are reported and ignored.
        """
        if not conf:
            return

        dests = {a.dest for a in parser._actions}
        known: Dict[str, Any] = {}
        for k, v in conf.items():
            if k in dests:
                known[k] = v
            else:
                logger.warning("Ignoring unknown config key: %s", k)

        # Repeatable options expect lists.
        for k in ("namespaces", "exclude_namespaces", "resources"):
            if k in known and isinstance(known[k], str):
                known[k] = [known[k]]

        parser.set_defaults(**known)
        logger.debug("Config defaults applied: %s", ", ".join(sorted(known)) or "(none)")
