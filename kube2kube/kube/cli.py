# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/kube/cli.py

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any, List, Optional

from ..core.exceptions import KubectlError, wrap_kubectl
from ..core.utils import U

LOG = logging.getLogger(__name__)

KUBECTL = "kubectl"


def _is_not_found(stderr: str) -> bool:
    s = (stderr or "").lower()
    return "notfound" in s or "not found" in s


def kubectl_cmd(
    args: List[str],
    *,
    context: Optional[str] = None,
    kubeconfig: Optional[str] = None,
    kubectl: str = KUBECTL,
) -> List[str]:
    """
    Build a kubectl command line. Context and kubeconfig are always passed
    explicitly; the active context in the kubeconfig is never switched.
    """
    cmd = [kubectl]
    if kubeconfig:
        cmd += ["--kubeconfig", kubeconfig]
    if context:
        cmd += ["--context", context]
    return cmd + list(args)


def run_kubectl(
    args: List[str],
    *,
    context: Optional[str] = None,
    kubeconfig: Optional[str] = None,
    timeout_s: float = 600,
    logger: Optional[logging.Logger] = None,
    kubectl: str = KUBECTL,
) -> str:
    """
    Run kubectl and return stdout. Any failure raises KubectlError;
    no retries.
    """
    log = logger or LOG
    cmd = kubectl_cmd(args, context=context, kubeconfig=kubeconfig, kubectl=kubectl)
    pretty = U._pretty_cmd(cmd)

    try:
        p = U.run_cmd(log, cmd, check=False, capture=True, timeout=timeout_s)
    except FileNotFoundError as e:
        raise wrap_kubectl(f"{kubectl} not found. Install kubectl.", e, code=5)
    except subprocess.TimeoutExpired as e:
        raise wrap_kubectl(f"kubectl timed out after {timeout_s}s: {pretty}", e, timeout_s=timeout_s)

    if p.returncode != 0:
        err = (p.stderr or p.stdout or "").strip()
        raise KubectlError(
            code=40,
            msg=f"kubectl failed: {' '.join(args)} :: {err}",
            context={"context": context, "returncode": p.returncode, "not_found": _is_not_found(err)},
        )
    return p.stdout or ""


def run_kubectl_json(args: List[str], **kwargs: Any) -> Any:
    """Run 'kubectl <args> -o json' and parse the result."""
    out = run_kubectl(list(args) + ["-o", "json"], **kwargs).strip()
    if out == "":
        return None
    try:
        return json.loads(out)
    except ValueError as e:
        raise wrap_kubectl(f"Failed to parse kubectl JSON output: {e}", e, args=" ".join(args))


def is_not_found_error(e: KubectlError) -> bool:
    return bool((e.context or {}).get("not_found"))
