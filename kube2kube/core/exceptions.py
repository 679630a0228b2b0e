# SPDX-License-Identifier: LGPL-3.0-or-later
# kube2kube/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _safe_int(x: Any, default: int = 1) -> int:
    try:
        return int(x)
    except Exception:
        return default


def _clamp_exit_code(code: int) -> int:
    # Exit codes are 0..255.
    if code < 0:
        return 1
    if code > 255:
        return 255
    return code


def _one_line(s: str, limit: int = 600) -> str:
    s = (s or "").strip().replace("\r", " ").replace("\n", " ")
    s = " ".join(s.split())
    return s if len(s) <= limit else (s[: limit - 3] + "...")


_SECRET_KEY_PARTS = (
    "pass",
    "password",
    "passwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "auth",
    "cookie",
    "bearer",
    "private",
    "credential",
)

REDACTED = "***REDACTED***"


def _is_secret_key(k: str) -> bool:
    ks = (k or "").lower()
    return any(p in ks for p in _SECRET_KEY_PARTS)


def _redact(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: (REDACTED if _is_secret_key(str(k)) else _redact(v)) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_redact(x) for x in obj]
    return obj


def _format_context_compact(ctx: Dict[str, Any]) -> str:
    parts = []
    for k in sorted(ctx.keys()):
        v = ctx.get(k)
        if _is_secret_key(str(k)):
            parts.append(f"{k}=<redacted>")
        else:
            parts.append(f"{k}={v!r}")
    return ", ".join(parts)


@dataclass(eq=False)
class Kube2KubeError(Exception):
    """
    Base project error with:
      - stable fields for reporting/JSON
      - readable __str__ (what users see)
      - exit code clamped to 0..255
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _clamp_exit_code(_safe_int(self.code, default=1))
        self.msg = _one_line(self.msg) or self.__class__.__name__
        if self.context is None:
            self.context = {}
        super().__init__(self.msg)
        self.args = (self.msg,)

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        """Human-friendly message for CLI output/logs."""
        parts = [self.msg or self.__class__.__name__]

        if include_context and self.context:
            parts.append(f"[{_one_line(_format_context_compact(self.context), limit=600)}]")

        if include_cause and self.cause is not None:
            parts.append(f"(cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})")

        return " ".join(parts)

    def __str__(self) -> str:
        return self.user_message(include_context=False, include_cause=False)

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "code": self.code,
            "message": self.msg,
            "context": _redact(self.context or {}),
        }
        if include_cause and self.cause is not None:
            d["cause"] = {"type": type(self.cause).__name__, "message": _one_line(str(self.cause))}
        return d


class Fatal(Kube2KubeError):
    """
    User-facing fatal error (exit code should be honored by top-level main()).
    """
    pass


class KubectlError(Kube2KubeError):
    """
    A kubectl invocation failed (non-zero exit, timeout, unparsable output).
    Warning-level for per-resource operations; callers decide.
    """
    pass


class ProviderError(Kube2KubeError):
    """Provider CLI (minikube/kind/k3d/...) operation failed."""
    pass


class EndpointError(Fatal):
    """A source/target cluster endpoint could not be resolved."""
    pass


class EndpointNotFound(EndpointError):
    pass


class EndpointUnreachable(EndpointError):
    pass


class AmbiguousContext(EndpointError):
    pass


class NoNamespaces(Fatal):
    """Namespace plan is empty after filtering (or nothing was requested)."""
    pass


class NamespaceCreationError(Kube2KubeError):
    """
    Namespace could not be created on the target.
    Aborts the import of that namespace only.
    """
    pass


class SanitizeError(Kube2KubeError):
    """A staged manifest file could not be sanitized."""
    pass


def wrap_kubectl(msg: str, exc: Optional[BaseException] = None, code: int = 40, **context: Any) -> KubectlError:
    return KubectlError(code=code, msg=msg, cause=exc, context=context or None)


def wrap_provider(msg: str, exc: Optional[BaseException] = None, code: int = 41, **context: Any) -> ProviderError:
    return ProviderError(code=code, msg=msg, cause=exc, context=context or None)


def endpoint_not_found(msg: str, **context: Any) -> EndpointNotFound:
    return EndpointNotFound(code=20, msg=msg, context=context or None)


def endpoint_unreachable(msg: str, exc: Optional[BaseException] = None, **context: Any) -> EndpointUnreachable:
    return EndpointUnreachable(code=21, msg=msg, cause=exc, context=context or None)


def ambiguous_context(msg: str, **context: Any) -> AmbiguousContext:
    return AmbiguousContext(code=22, msg=msg, context=context or None)


def no_namespaces(msg: str, **context: Any) -> NoNamespaces:
    return NoNamespaces(code=23, msg=msg, context=context or None)


def namespace_creation_failed(msg: str, exc: Optional[BaseException] = None, **context: Any) -> NamespaceCreationError:
    return NamespaceCreationError(code=24, msg=msg, cause=exc, context=context or None)


def sanitize_failed(msg: str, exc: Optional[BaseException] = None, **context: Any) -> SanitizeError:
    return SanitizeError(code=25, msg=msg, cause=exc, context=context or None)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    One-liner output for CLI.

    verbose=0: just message
    verbose=1: message + compact context (if any)
    verbose>=2: message + context + cause
    """
    if isinstance(e, Kube2KubeError):
        return e.user_message(
            include_context=(verbose >= 1),
            include_cause=(verbose >= 2),
        )

    if verbose >= 2:
        return f"{type(e).__name__}: {_one_line(str(e))}"
    return _one_line(str(e)) or type(e).__name__
