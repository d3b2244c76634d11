"""Tests for persisting summaries as .mdc files."""

import tempfile
import unittest
from pathlib import Path

from sun_session_summarizer.messages import parse_session_content
from sun_session_summarizer.summaries.analyzer import summarize_session
from sun_session_summarizer.summaries.storage import (
    SummaryStore,
    get_default_summaries_dir,
    split_front_matter,
    write_summary,
)

TRANSCRIPT = "Human: 请创建一个登录页面\nAssistant: 我已经创建了登录页面并完成了测试"


class TestSummaryStore(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.store = SummaryStore(self.root)
        self.summary = summarize_session(parse_session_content(TRANSCRIPT))

    def tearDown(self):
        self._tmp.cleanup()

    def test_save_writes_front_matter_and_body(self):
        saved = self.store.save(self.summary, context="登录模块")
        self.assertTrue(saved.path.is_file())
        self.assertTrue(saved.filename.endswith(".mdc"))
        self.assertIn("测试开发", saved.filename)

        text = saved.path.read_text(encoding="utf-8")
        metadata, body = split_front_matter(text)
        self.assertEqual(metadata["title"], "测试开发会话总结")
        self.assertEqual(metadata["completionStatus"], "completed")
        self.assertEqual(metadata["messageCount"], 2)
        self.assertEqual(metadata["context"], "登录模块")
        self.assertIn("createdAt", metadata)
        self.assertTrue(body.startswith("# 测试开发会话总结"))
        self.assertIn("## 核心精髓", body)
        self.assertIn("## 上下文", body)

    def test_get_by_filename_with_or_without_suffix(self):
        saved = self.store.save(self.summary)
        content = self.store.get(saved.filename)
        self.assertIsNotNone(content)
        self.assertIn(self.summary.essence, content)
        self.assertEqual(self.store.get(saved.filename[: -len(".mdc")]), content)

    def test_get_missing_returns_none(self):
        self.assertIsNone(self.store.get("never-saved.mdc"))
        self.assertIsNone(self.store.get(""))

    def test_get_rejects_paths_outside_root(self):
        outside = self.root.parent / "outside.mdc"
        self.assertIsNone(self.store.get("../outside.mdc"))
        self.assertIsNone(self.store.get(str(outside)))

    def test_saves_in_same_second_do_not_collide(self):
        first = self.store.save(self.summary)
        second = self.store.save(self.summary)
        self.assertNotEqual(first.path, second.path)
        self.assertEqual(len(self.store.list()), 2)

    def test_list_rebuilds_summary(self):
        self.store.save(self.summary)
        entries = self.store.list()
        self.assertEqual(len(entries), 1)
        loaded = entries[0].summary
        self.assertEqual(loaded.title, self.summary.title)
        self.assertEqual(loaded.functionality, self.summary.functionality)
        self.assertEqual(loaded.key_points, self.summary.key_points)
        self.assertEqual(loaded.outcomes, self.summary.outcomes)
        self.assertEqual(loaded.next_steps, self.summary.next_steps)
        self.assertEqual(loaded.message_count, 2)

    def test_list_is_newest_first(self):
        metadata = self.summary.to_dict()
        write_summary(self.root / "old.mdc", "old\n", {**metadata, "createdAt": "2024-01-01T00:00:00+00:00"})
        write_summary(self.root / "new.mdc", "new\n", {**metadata, "createdAt": "2025-01-01T00:00:00+00:00"})
        self.assertEqual([entry.filename for entry in self.store.list()], ["new.mdc", "old.mdc"])

    def test_list_mixes_naive_and_aware_timestamps(self):
        saved = self.store.save(self.summary)
        (self.root / "old.mdc").write_text(
            "---\ntitle: 旧总结\ncompletionStatus: partial\ncreatedAt: 2024-01-01 10:00:00\n---\n\nold\n",
            encoding="utf-8",
        )
        entries = self.store.list()
        self.assertEqual([entry.filename for entry in entries], [saved.filename, "old.mdc"])
        self.assertIsNotNone(entries[1].created_at.tzinfo)

    def test_get_serves_non_utf8_file(self):
        (self.root / "bad.mdc").write_bytes(b"\xff\xfe garbage")
        content = self.store.get("bad.mdc")
        self.assertIsNotNone(content)
        self.assertIn("garbage", content)

    def test_list_skips_files_without_front_matter(self):
        (self.root / "junk.mdc").write_text("hello\n", encoding="utf-8")
        self.store.save(self.summary)
        self.assertEqual(len(self.store.list()), 1)

    def test_list_on_missing_directory(self):
        store = SummaryStore(self.root / "does-not-exist")
        self.assertEqual(store.list(), [])


class TestFrontMatter(unittest.TestCase):
    def test_no_front_matter(self):
        self.assertEqual(split_front_matter("plain"), ({}, "plain"))

    def test_unterminated_front_matter_keeps_content(self):
        metadata, body = split_front_matter("---\ntitle: x\n")
        self.assertEqual(metadata, {})
        self.assertEqual(body, "---\ntitle: x\n")

    def test_non_mapping_front_matter_is_rejected(self):
        with self.assertRaises(ValueError):
            split_front_matter("---\n- a\n- b\n---\nbody\n")


class TestDefaultDirectory(unittest.TestCase):
    def test_env_override(self):
        from unittest.mock import patch

        with patch.dict("os.environ", {"SUN_SUMMARIES_DIR": "/tmp/sun-test"}):
            self.assertEqual(get_default_summaries_dir(), Path("/tmp/sun-test"))


if __name__ == "__main__":
    unittest.main()
