# SPDX-License-Identifier: LGPL-3.0-or-later
import argparse
import unittest
from unittest.mock import Mock, patch

from kube2kube.__main__ import main
from kube2kube.core.exceptions import Fatal, endpoint_unreachable


class TestMain(unittest.TestCase):
    def setUp(self):
        self.logger = Mock()
        self.args = argparse.Namespace(verbose=0)

    def _run(self, run_effect=None, run_value=0):
        with patch("kube2kube.__main__.parse_args_with_config", return_value=(self.args, {}, self.logger)), \
                patch("kube2kube.__main__.MigrationOrchestrator") as orch:
            orch.return_value.run.side_effect = run_effect
            orch.return_value.run.return_value = run_value
            with self.assertRaises(SystemExit) as cm:
                main([])
        return cm.exception.code

    def test_success(self):
        self.assertEqual(self._run(), 0)

    def test_fatal_exit_code(self):
        self.assertEqual(self._run(endpoint_unreachable("Cannot access cluster")), 21)
        self.assertIn("Cannot access cluster", self.logger.error.call_args[0][0])

    def test_interrupt(self):
        self.assertEqual(self._run(KeyboardInterrupt()), 130)

    def test_unhandled(self):
        self.assertEqual(self._run(RuntimeError("boom")), 1)
        self.assertIn("UNHANDLED RuntimeError", self.logger.error.call_args[0][0])

    @patch("kube2kube.__main__.parse_args_with_config", side_effect=Fatal(2, "Config file not found: x"))
    def test_config_error(self, _parse):
        with self.assertRaises(SystemExit) as cm:
            main(["--config", "x"])
        self.assertEqual(cm.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
