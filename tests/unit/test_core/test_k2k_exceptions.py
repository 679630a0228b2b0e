# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for exception handling and secret redaction."""
from __future__ import annotations

import pytest

from kube2kube.core.exceptions import (
    AmbiguousContext,
    EndpointError,
    EndpointNotFound,
    EndpointUnreachable,
    Fatal,
    KubectlError,
    Kube2KubeError,
    NamespaceCreationError,
    NoNamespaces,
    ambiguous_context,
    endpoint_not_found,
    endpoint_unreachable,
    format_exception_for_cli,
    namespace_creation_failed,
    no_namespaces,
    sanitize_failed,
    wrap_kubectl,
    wrap_provider,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    def test_base_exception_creation(self):
        err = Kube2KubeError(code=1, msg="Test error")

        assert err.code == 1
        assert err.msg == "Test error"
        assert err.cause is None
        assert err.context == {}

    def test_endpoint_errors_are_fatal(self):
        for cls in (EndpointNotFound, EndpointUnreachable, AmbiguousContext):
            err = cls(code=20, msg="x")
            assert isinstance(err, EndpointError)
            assert isinstance(err, Fatal)

    def test_namespace_errors(self):
        assert isinstance(NoNamespaces(msg="x"), Fatal)
        assert not isinstance(NamespaceCreationError(msg="x"), Fatal)

    def test_exit_code_is_clamped(self):
        assert Kube2KubeError(code=999, msg="x").code == 255
        assert Kube2KubeError(code=-3, msg="x").code == 1
        assert Kube2KubeError(code="nope", msg="x").code == 1  # type: ignore[arg-type]

    def test_message_is_single_line(self):
        err = Fatal(code=1, msg="line one\nline two\r\n  three")
        assert str(err) == "line one line two three"


@pytest.mark.unit
class TestWrapHelpers:
    def test_helper_codes(self):
        assert endpoint_not_found("x").code == 20
        assert endpoint_unreachable("x").code == 21
        assert ambiguous_context("x").code == 22
        assert no_namespaces("x").code == 23
        assert namespace_creation_failed("x").code == 24
        assert sanitize_failed("x").code == 25
        assert wrap_kubectl("x").code == 40
        assert wrap_provider("x").code == 41

    def test_helper_types(self):
        assert isinstance(endpoint_not_found("x"), EndpointNotFound)
        assert isinstance(ambiguous_context("x"), AmbiguousContext)
        assert isinstance(wrap_kubectl("x"), KubectlError)

    def test_cause_and_context_are_kept(self):
        cause = OSError("boom")
        err = endpoint_unreachable("cannot reach", cause, context="kind-prod")

        assert err.cause is cause
        assert err.context == {"context": "kind-prod"}


@pytest.mark.security
class TestSecretRedaction:
    def test_token_redacted_in_dict(self):
        err = Kube2KubeError(
            code=1,
            msg="Auth failed",
            context={"user": "admin", "token": "abc123", "context": "gke_proj_zone_c"},
        )

        d = err.to_dict()

        assert d["context"]["token"] == "***REDACTED***"
        assert d["context"]["user"] == "admin"
        assert d["context"]["context"] == "gke_proj_zone_c"

    def test_nested_secret_redacted(self):
        err = Kube2KubeError(code=1, msg="x", context={"creds": {"client_secret": "s", "id": "i"}})

        d = err.to_dict()

        assert d["context"]["creds"]["client_secret"] == "***REDACTED***"
        assert d["context"]["creds"]["id"] == "i"

    def test_user_message_hides_secret(self):
        err = Kube2KubeError(code=1, msg="failed", context={"password": "hunter2"})

        text = err.user_message(include_context=True)

        assert "hunter2" not in text
        assert "password=<redacted>" in text


@pytest.mark.unit
class TestFormatForCli:
    def test_verbosity_levels(self):
        err = wrap_kubectl("kubectl failed", ValueError("bad json"), namespace="web")

        assert format_exception_for_cli(err) == "kubectl failed"
        assert "namespace='web'" in format_exception_for_cli(err, verbose=1)
        assert "cause: ValueError: bad json" in format_exception_for_cli(err, verbose=2)

    def test_plain_exception(self):
        assert format_exception_for_cli(RuntimeError("oops")) == "oops"
        assert format_exception_for_cli(RuntimeError("oops"), verbose=2) == "RuntimeError: oops"
