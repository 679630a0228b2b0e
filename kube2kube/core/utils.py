# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/core/utils.py
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, TypeVar, Union

from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

from .exceptions import Fatal
from .logger import is_tty

T = TypeVar("T")


class U:
    @staticmethod
    def die(logger: logging.Logger, msg: str, code: int = 1) -> None:
        logger.error(msg)
        raise Fatal(code, msg)

    @staticmethod
    def ensure_dir(p: Path) -> None:
        p.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def which(prog: str) -> Optional[str]:
        from shutil import which as _which
        return _which(prog)

    @staticmethod
    def now_ts() -> str:
        return _dt.datetime.now().strftime("%Y%m%d-%H%M%S")

    @staticmethod
    def json_dump(obj: Any) -> str:
        try:
            return json.dumps(obj, indent=2, sort_keys=True, default=str)
        except Exception:
            return repr(obj)

    @staticmethod
    def banner(logger: logging.Logger, title: str) -> None:
        line = "─" * max(10, len(title) + 2)
        logger.info(line)
        logger.info(f" {title}")
        logger.info(line)

    @staticmethod
    def _pretty_cmd(cmd: Sequence[str]) -> str:
        return " ".join(shlex.quote(x) for x in cmd)

    @staticmethod
    def run_cmd(
        logger: logging.Logger,
        cmd: List[str],
        *,
        check: bool = True,
        capture: bool = False,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        cwd: Optional[Union[str, Path]] = None,
        input_text: Optional[str] = None,
        fatal: bool = False,
    ) -> subprocess.CompletedProcess:
        """
        Run a command.

        - capture=True uses subprocess.run(capture_output=True, text=True)
        - fatal=True wraps failures into Fatal (otherwise re-raises subprocess exceptions)
        """
        pretty = U._pretty_cmd(cmd)
        logger.debug("Running: %s", pretty)

        try:
            return subprocess.run(
                cmd,
                check=check,
                capture_output=capture,
                text=True,
                env=env,
                timeout=timeout,
                cwd=str(cwd) if cwd is not None else None,
                input=input_text,
            )

        except subprocess.CalledProcessError as e:
            stdout = (e.stdout or e.output or "").strip()
            stderr = (e.stderr or "").strip()
            if stdout or stderr:
                logger.debug(
                    "Command failed: %s%s%s",
                    pretty,
                    f"\nstdout:\n{stdout}" if stdout else "",
                    f"\nstderr:\n{stderr}" if stderr else "",
                )
            else:
                logger.debug("Command failed: %s (no output)", pretty)

            if fatal:
                raise Fatal(e.returncode or 1, f"Command failed: {pretty}") from e
            raise

        except subprocess.TimeoutExpired as e:
            logger.debug("Command timed out: %s (timeout=%ss)", pretty, timeout)
            if fatal:
                raise Fatal(124, f"Command timed out: {pretty}") from e
            raise

        except FileNotFoundError as e:
            logger.debug("Command not found: %s (%s)", pretty, e)
            if fatal:
                raise Fatal(127, f"Command not found: {cmd[0]}") from e
            raise

    @staticmethod
    def iter_progress(items: Sequence[T], description: str) -> Iterator[T]:
        """
        Iterate `items`, drawing a rich progress bar when stderr is a TTY.
        Non-TTY output stays line-based (CI logs).
        """
        if not is_tty() or not items:
            yield from items
            return

        with Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            transient=True,
        ) as progress:
            task = progress.add_task(description, total=len(items))
            for item in items:
                progress.update(task, description=f"{description}: {item}")
                yield item
                progress.update(task, advance=1)

    @staticmethod
    def atomic_write_text(path: Path, content: str, suffix: str = ".tmp.kube2kube") -> None:
        """
        Write temp file in the same directory, fsync, then os.replace onto target.
        """
        tmp = Path(str(path) + suffix)
        U.ensure_dir(path.parent)
        try:
            with open(tmp, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(str(tmp), str(path))
        finally:
            U.safe_unlink(tmp)

    @staticmethod
    def safe_unlink(p: Path, *, missing_ok: bool = True) -> None:
        try:
            p.unlink()
        except FileNotFoundError:
            if not missing_ok:
                raise

    @staticmethod
    def dedupe(items: Iterable[T]) -> List[T]:
        """Drop repeats, keep first occurrence order."""
        seen = set()
        out: List[T] = []
        for x in items:
            if x in seen:
                continue
            seen.add(x)
            out.append(x)
        return out
