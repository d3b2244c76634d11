"""Tests for the sun-session-summarizer command line."""

import contextlib
import io
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from sun_session_summarizer.cli import main


def _run(argv):
    stdout = io.StringIO()
    with contextlib.redirect_stdout(stdout):
        code = main(argv)
    return code, stdout.getvalue()


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.summaries = self.root / "summaries"
        self.transcript = self.root / "session.txt"
        self.transcript.write_text(
            "Human: 请实现接口开发\nAssistant: 实现了用户接口，下一步是写文档。",
            encoding="utf-8",
        )

    def tearDown(self):
        self._tmp.cleanup()

    def _base(self):
        return ["--summaries-dir", str(self.summaries)]

    def test_summarize_file_and_list(self):
        code, output = _run(self._base() + ["summarize", str(self.transcript)])
        self.assertEqual(code, 0)
        self.assertIn("会话总结已保存！", output)
        self.assertEqual(len(list(self.summaries.glob("*.mdc"))), 1)

        code, output = _run(self._base() + ["list"])
        self.assertEqual(code, 0)
        self.assertIn("API开发", output)
        self.assertIn("Filename", output)

    def test_summarize_stdout_does_not_save(self):
        code, output = _run(
            self._base() + ["summarize", str(self.transcript), "--stdout", "--language", "en"]
        )
        self.assertEqual(code, 0)
        self.assertTrue(output.startswith("# API Development Session Summary"))
        self.assertFalse(self.summaries.exists())

    def test_summarize_from_stdin(self):
        with patch("sys.stdin", io.StringIO("just a note")):
            code, _ = _run(self._base() + ["summarize", "-"])
        self.assertEqual(code, 0)
        self.assertEqual(len(list(self.summaries.glob("*.mdc"))), 1)

    def test_summarize_empty_input_is_rejected(self):
        with patch("sys.stdin", io.StringIO("")), contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                _run(self._base() + ["summarize"])
        self.assertEqual(ctx.exception.code, 2)

    def test_summarize_missing_file(self):
        with contextlib.redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            _run(self._base() + ["summarize", str(self.root / "missing.txt")])

    def test_show(self):
        _run(self._base() + ["summarize", str(self.transcript)])
        filename = next(self.summaries.glob("*.mdc")).name
        code, output = _run(self._base() + ["show", filename])
        self.assertEqual(code, 0)
        self.assertIn("API开发会话总结", output)

    def test_show_missing(self):
        with contextlib.redirect_stderr(io.StringIO()) as stderr:
            code, _ = _run(self._base() + ["show", "nope.mdc"])
        self.assertEqual(code, 1)
        self.assertIn("Summary not found", stderr.getvalue())

    def test_list_empty(self):
        code, output = _run(self._base() + ["list"])
        self.assertEqual(code, 0)
        self.assertIn("No summaries found", output)


if __name__ == "__main__":
    unittest.main()
