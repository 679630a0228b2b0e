# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/core/sanity_checker.py
from __future__ import annotations

import argparse
import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..kube.models import Provider
from ..providers.conventions import PROVIDER_TOOL_LABELS, PROVIDER_TOOLS
from .utils import U


class ExitCode(IntEnum):
    OK = 0
    BAD_ARGS = 2
    PERMISSION = 3
    TOOLS_MISSING = 5
    INTERNAL = 99


class ErrorKind:
    TOOLS = "tools"
    PERMISSION = "permission"
    BAD_ARGS = "bad_args"


@dataclass
class SanityIssue:
    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


@dataclass
class SanityReport:
    missing_required: List[str] = field(default_factory=list)
    missing_optional: List[str] = field(default_factory=list)

    errors: List[SanityIssue] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    notes: Dict[str, str] = field(default_factory=dict)

    checks_ran: List[str] = field(default_factory=list)

    def ok(self) -> bool:
        return not self.missing_required and not self.errors

    def add_error(self, kind: str, msg: str) -> None:
        self.errors.append(SanityIssue(kind=kind, message=msg))

    def exit_code(self) -> int:
        if self.ok():
            return int(ExitCode.OK)

        kinds = {e.kind for e in self.errors}
        if ErrorKind.BAD_ARGS in kinds:
            return int(ExitCode.BAD_ARGS)
        if self.missing_required:
            return int(ExitCode.TOOLS_MISSING)
        if ErrorKind.PERMISSION in kinds:
            return int(ExitCode.PERMISSION)
        return int(ExitCode.INTERNAL)


class SanityChecker:
    """
    Pre-flight checks for a migration run:
      - kubectl plus the CLI of each involved provider on PATH
      - staging directory writable (skipped in dry-run)
    """

    def __init__(self, logger: logging.Logger, args: argparse.Namespace):
        self.logger = logger
        self.args = args
        self.report = SanityReport()

    def _providers(self) -> List[Provider]:
        out: List[Provider] = []
        for key in ("source_provider", "target_provider"):
            v = getattr(self.args, key, None)
            if v:
                p = Provider.parse(v)
                if p not in out:
                    out.append(p)
        return out

    def check_tools(self) -> None:
        self.report.checks_ran.append("tools")

        required: List[Tuple[str, str]] = [("kubectl", "kubectl")]
        for p in self._providers():
            required.append((PROVIDER_TOOLS[p], PROVIDER_TOOL_LABELS[p]))

        self.report.notes["required_tools"] = ", ".join(t for t, _ in required)

        for tool, label in required:
            if U.which(tool) is None:
                self.report.missing_required.append(tool)
                self.logger.error("%s not found. Please install it first.", label)

        if self.report.missing_required:
            self.report.add_error(
                ErrorKind.TOOLS, f"Missing required tools: {', '.join(self.report.missing_required)}"
            )

    def check_staging_dir(self) -> None:
        self.report.checks_ran.append("staging")

        staging: Optional[str] = getattr(self.args, "staging_dir", None)
        if getattr(self.args, "dry_run", False) or not staging:
            self.report.notes["staging"] = "SKIPPED"
            return

        root = Path(staging).expanduser()
        try:
            root.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=".permtest_", dir=str(root))
            os.close(fd)
            Path(tmp).unlink(missing_ok=True)
            self.report.notes["staging"] = "OK"
        except OSError as e:
            self.report.add_error(ErrorKind.PERMISSION, f"Staging directory not writable: {root}: {e!s}")

    def _log_summary(self) -> None:
        if self.report.ok():
            self.logger.info("All required tools are available.")
            self.logger.debug("Sanity notes: %s", self.report.notes)
            return

        self.logger.error("Sanity: FAILED (exit=%s)", self.report.exit_code())
        for e in self.report.errors:
            self.logger.error("Sanity error[%s]: %s", e.kind, e.message)
        for w in self.report.warnings:
            self.logger.warning("Sanity warn: %s", w)

    def check_all(self) -> SanityReport:
        checks: Sequence[Tuple[str, Callable[[], None]]] = [
            ("tools", self.check_tools),
            ("staging", self.check_staging_dir),
        ]
        for name, fn in checks:
            self.logger.debug("Sanity: %s...", name)
            fn()
        self._log_summary()
        return self.report

    def die_if_failed(self) -> None:
        if not self.report.checks_ran:
            self.check_all()

        if self.report.ok():
            return

        code = self.report.exit_code()
        if self.report.missing_required:
            U.die(self.logger, f"Sanity failed: missing required tools: {', '.join(self.report.missing_required)}", code)

        headline = self.report.errors[0].message if self.report.errors else "Sanity failed"
        U.die(self.logger, f"Sanity failed: {headline}", code)
