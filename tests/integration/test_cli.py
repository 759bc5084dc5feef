#!/usr/bin/env python3
"""
Integration tests for the command-line entry point
"""

import io
import logging
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

from parker.application.commands import CommandInvoker
from parker.domain.exceptions import PoolInvariantViolation
from parker.infrastructure.factories import build_context
from parker.main import EXIT_FAILURE, EXIT_INTERNAL_ERROR, EXIT_OK, main, read_lines, run


class TestRun(unittest.TestCase):

    def setUp(self):
        self.invoker = CommandInvoker(build_context(log_events=False))
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()

    def test_successful_run(self):
        status = run(
            ["create_parking_lot 2", "park KA-01-HH-1234", "", "status"],
            self.invoker, self.stdout, self.stderr,
        )
        self.assertEqual(status, EXIT_OK)
        self.assertEqual(self.stdout.getvalue().splitlines(), [
            "Created parking lot with 2 slots",
            "Allocated slot number: 1",
            "Slot No. Registration No.",
            "1 KA-01-HH-1234",
        ])
        self.assertEqual(self.stderr.getvalue(), "")

    def test_failures_continue_and_set_exit_status(self):
        with self.assertLogs("CommandInvoker", level="WARNING"):
            status = run(
                ["park KA-01-HH-1234", "create_parking_lot 1", "leave KA-01-HH-9999 2", "park KA-01-HH-1234"],
                self.invoker, self.stdout, self.stderr,
            )
        self.assertEqual(status, EXIT_FAILURE)
        self.assertEqual(self.stdout.getvalue().splitlines(), [
            "Created parking lot with 1 slots",
            "Registration number KA-01-HH-9999 not found",
            "Allocated slot number: 1",
        ])
        errors = self.stderr.getvalue().splitlines()
        self.assertEqual(len(errors), 1)
        self.assertTrue(errors[0].startswith("ERROR: Parking lot has not been created"))

    def test_invariant_violation_stops_run(self):
        self.invoker.execute_line("create_parking_lot 1")
        with patch.object(self.invoker.context.service, "park", side_effect=PoolInvariantViolation("heap broken")):
            with self.assertLogs("CommandInvoker", level="CRITICAL"):
                status = run(["park KA-01-HH-1234", "status"], self.invoker, self.stdout, self.stderr)

        self.assertEqual(status, EXIT_INTERNAL_ERROR)
        self.assertEqual(self.stderr.getvalue().strip(), "FATAL: heap broken")
        self.assertEqual(self.stdout.getvalue(), "")


class TestMain(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmpdir)
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    def _write(self, name, text):
        path = self.tmpdir / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    def _main(self, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            status = main(argv)
        return status, stdout.getvalue(), stderr.getvalue()

    def test_main_runs_file(self):
        path = self._write("input.txt", "create_parking_lot 3\npark KA-01-HH-1234\nleave KA-01-HH-1234 5\n")
        status, out, _ = self._main([path, "--log-level", "critical"])

        self.assertEqual(status, EXIT_OK)
        self.assertEqual(out.splitlines(), [
            "Created parking lot with 3 slots",
            "Allocated slot number: 1",
            "Registration number KA-01-HH-1234 with Slot Number 1 is free with Charge 40",
        ])

    def test_main_with_config_file(self):
        config = self._write("parker.yaml", "pricing:\n  flat_rate_charge: 1\n  per_hour_charge: 1\nlogging:\n  level: CRITICAL\n")
        path = self._write("input.txt", "create_parking_lot 1\npark KA-01-HH-1234\nleave KA-01-HH-1234 5\n")
        status, out, _ = self._main([path, "--config", config])

        self.assertEqual(status, EXIT_OK)
        self.assertEqual(out.splitlines()[-1], "Registration number KA-01-HH-1234 with Slot Number 1 is free with Charge 4")

    def test_main_with_log_file(self):
        log_file = self.tmpdir / "logs" / "parker.log"
        config = self._write("parker.yaml", f"logging:\n  level: INFO\n  file: {log_file}\n")
        path = self._write("input.txt", "create_parking_lot 1\n")
        status, _, _ = self._main([path, "-c", config])

        self.assertEqual(status, EXIT_OK)
        for handler in logging.getLogger().handlers:
            handler.flush()
        self.assertIn("Created parking lot", log_file.read_text(encoding="utf-8"))

    def test_main_missing_input_file(self):
        status, out, err = self._main([str(self.tmpdir / "missing.txt"), "--log-level", "CRITICAL"])
        self.assertEqual(status, EXIT_FAILURE)
        self.assertEqual(out, "")
        self.assertIn("Cannot read input file", err)

    def test_main_bad_config(self):
        config = self._write("parker.yaml", "pricing:\n  per_hour_charge: -1\n")
        path = self._write("input.txt", "create_parking_lot 1\n")
        status, out, err = self._main([path, "--config", config])
        self.assertEqual(status, EXIT_FAILURE)
        self.assertEqual(out, "")
        self.assertTrue(err.startswith("ERROR:"))


class TestReadLines(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_reads_lines(self):
        path = self.tmpdir / "input.txt"
        path.write_text("status\r\npark KA-01-HH-1234\n", encoding="utf-8")
        self.assertEqual(read_lines(path), ["status", "park KA-01-HH-1234"])

    def test_rejects_empty_file_and_directory(self):
        empty = self.tmpdir / "empty.txt"
        empty.touch()
        for path in (empty, self.tmpdir, self.tmpdir / "missing.txt"):
            with self.subTest(path=path):
                with self.assertRaises(OSError):
                    read_lines(path)


if __name__ == "__main__":
    unittest.main()
