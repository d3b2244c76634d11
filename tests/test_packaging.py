"""Sanity checks on the package metadata."""

import re
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


class TestPackageMetadata(unittest.TestCase):
    def test_readme_is_the_project_readme(self):
        pyproject = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
        match = re.search(r'^readme\s*=\s*"([^"]+)"', pyproject, re.MULTILINE)
        self.assertIsNotNone(match)
        self.assertEqual(match.group(1), "README.md")
        self.assertIn("sun-session-summarizer", (ROOT / match.group(1)).read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
