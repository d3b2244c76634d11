"""Tests for request validation and orchestration in SummaryService."""

import tempfile
import unittest
from pathlib import Path

from sun_session_summarizer.summaries import (
    MissingInputError,
    SummarizeRequest,
    SummaryService,
    UnsupportedLanguageError,
    request_from_arguments,
)


class TestSummaryService(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.service = SummaryService(Path(self._tmp.name))

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_content_is_rejected_before_analysis(self):
        with self.assertRaises(MissingInputError):
            self.service.summarize(SummarizeRequest(session_content=""))
        self.assertEqual(self.service.list_summaries(), [])

    def test_unsupported_language(self):
        with self.assertRaises(UnsupportedLanguageError):
            self.service.analyze(SummarizeRequest(session_content="hi", language="fr"))

    def test_summarize_saves_and_lists(self):
        saved = self.service.summarize(
            SummarizeRequest(
                session_content="Human: 请创建数据库表\nAssistant: 已创建了users表",
                language="en",
            )
        )
        self.assertEqual(saved.summary.functionality, "Database Operations")
        self.assertEqual(saved.summary.title, "Database Operations Session Summary")
        entries = self.service.list_summaries()
        self.assertEqual([entry.filename for entry in entries], [saved.filename])

    def test_functionality_override(self):
        summary = self.service.analyze(
            SummarizeRequest(session_content="hi", functionality="Database Migration", language="en")
        )
        self.assertEqual(summary.title, "Database Migration Session Summary")

    def test_get_summary_not_found(self):
        self.assertIsNone(self.service.get_summary("missing.mdc"))

    def test_get_summary_requires_filename(self):
        with self.assertRaises(MissingInputError):
            self.service.get_summary("  ")


class TestRequestFromArguments(unittest.TestCase):
    def test_defaults(self):
        request = request_from_arguments({"sessionContent": "hi"})
        self.assertEqual(request.language, "zh")
        self.assertIsNone(request.functionality)
        self.assertIsNone(request.context)

    def test_language_is_normalized(self):
        request = request_from_arguments({"sessionContent": "hi", "language": " EN "})
        self.assertEqual(request.language, "en")

    def test_non_string_content_becomes_empty(self):
        self.assertEqual(request_from_arguments({"sessionContent": 42}).session_content, "")


if __name__ == "__main__":
    unittest.main()
