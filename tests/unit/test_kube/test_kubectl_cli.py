# SPDX-License-Identifier: LGPL-3.0-or-later
import subprocess
import unittest
from unittest.mock import Mock, patch

from kube2kube.core.exceptions import KubectlError
from kube2kube.kube.cli import is_not_found_error, kubectl_cmd, run_kubectl, run_kubectl_json


def _done(rc=0, out="", err=""):
    return subprocess.CompletedProcess(["kubectl"], rc, out, err)


class TestKubectlCmd(unittest.TestCase):
    def test_context_and_kubeconfig_are_explicit(self):
        cmd = kubectl_cmd(["get", "nodes"], context="kind-prod", kubeconfig="/tmp/kc")

        self.assertEqual(cmd, ["kubectl", "--kubeconfig", "/tmp/kc", "--context", "kind-prod", "get", "nodes"])

    def test_no_use_context(self):
        cmd = kubectl_cmd(["apply", "-f", "x.yaml"], context="dev")

        self.assertNotIn("use-context", cmd)
        self.assertEqual(cmd[:3], ["kubectl", "--context", "dev"])


class TestRunKubectl(unittest.TestCase):
    def setUp(self):
        self.logger = Mock()

    @patch("kube2kube.core.utils.subprocess.run")
    def test_returns_stdout(self, mock_run):
        mock_run.return_value = _done(out="node/a\n")

        out = run_kubectl(["get", "nodes", "-o", "name"], context="dev", timeout_s=30, logger=self.logger)

        self.assertEqual(out, "node/a\n")
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ["kubectl", "--context", "dev", "get", "nodes", "-o", "name"])
        self.assertEqual(kwargs["timeout"], 30)

    @patch("kube2kube.core.utils.subprocess.run")
    def test_nonzero_exit_raises(self, mock_run):
        mock_run.return_value = _done(rc=1, err='Error from server (NotFound): namespaces "x" not found')

        with self.assertRaises(KubectlError) as cm:
            run_kubectl(["get", "namespace", "x"], context="dev", logger=self.logger)

        self.assertEqual(cm.exception.code, 40)
        self.assertTrue(is_not_found_error(cm.exception))

    @patch("kube2kube.core.utils.subprocess.run")
    def test_other_failure_is_not_not_found(self, mock_run):
        mock_run.return_value = _done(rc=1, err="connection refused")

        with self.assertRaises(KubectlError) as cm:
            run_kubectl(["get", "nodes"], logger=self.logger)

        self.assertFalse(is_not_found_error(cm.exception))

    @patch("kube2kube.core.utils.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(["kubectl"], 5)

        with self.assertRaises(KubectlError) as cm:
            run_kubectl(["get", "nodes"], timeout_s=5, logger=self.logger)

        self.assertIn("timed out", str(cm.exception))

    @patch("kube2kube.core.utils.subprocess.run")
    def test_missing_binary(self, mock_run):
        mock_run.side_effect = FileNotFoundError("kubectl")

        with self.assertRaises(KubectlError) as cm:
            run_kubectl(["version"], logger=self.logger)

        self.assertEqual(cm.exception.code, 5)


class TestRunKubectlJson(unittest.TestCase):
    @patch("kube2kube.core.utils.subprocess.run")
    def test_parses_json(self, mock_run):
        mock_run.return_value = _done(out='{"kind": "List", "items": []}')

        doc = run_kubectl_json(["get", "pods", "-n", "web"], context="dev", logger=Mock())

        self.assertEqual(doc, {"kind": "List", "items": []})
        self.assertEqual(mock_run.call_args[0][0][-2:], ["-o", "json"])

    @patch("kube2kube.core.utils.subprocess.run")
    def test_empty_output_is_none(self, mock_run):
        mock_run.return_value = _done(out="  \n")

        self.assertIsNone(run_kubectl_json(["get", "pods"], logger=Mock()))

    @patch("kube2kube.core.utils.subprocess.run")
    def test_bad_json(self, mock_run):
        mock_run.return_value = _done(out="not json")

        with self.assertRaises(KubectlError):
            run_kubectl_json(["get", "pods"], logger=Mock())


if __name__ == "__main__":
    unittest.main()
