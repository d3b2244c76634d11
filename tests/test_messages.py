"""Tests for parsing raw conversation text into messages."""

import unittest

from sun_session_summarizer.messages import parse_session_content


class TestParseSessionContent(unittest.TestCase):
    def test_human_and_assistant_markers(self):
        session = parse_session_content(
            "Human: 请创建一个登录页面\nAssistant: 我已经创建了登录页面并完成了测试"
        )
        self.assertEqual([m.role for m in session.messages], ["user", "assistant"])
        self.assertEqual(session.messages[0].content, "请创建一个登录页面")
        self.assertEqual(session.messages[1].content, "我已经创建了登录页面并完成了测试")
        for message in session.messages:
            self.assertIsNotNone(message.timestamp)
        self.assertIsNotNone(session.start_time)

    def test_text_without_markers_is_single_untrimmed_message(self):
        session = parse_session_content("  just a note \n")
        self.assertEqual(len(session.messages), 1)
        self.assertEqual(session.messages[0].role, "user")
        self.assertEqual(session.messages[0].content, "  just a note \n")

    def test_plain_note(self):
        session = parse_session_content("just a note")
        self.assertEqual(len(session.messages), 1)
        self.assertEqual(session.messages[0].content, "just a note")

    def test_text_before_first_marker_is_dropped(self):
        session = parse_session_content("preamble\nHuman: hi\nAssistant: hello")
        self.assertEqual([m.content for m in session.messages], ["hi", "hello"])

    def test_multiline_turns_keep_their_lines(self):
        session = parse_session_content("Human: line one\nline two\n\nAssistant: ok")
        self.assertEqual(session.messages[0].content, "line one\nline two")

    def test_marker_with_no_body_yields_empty_content(self):
        session = parse_session_content("Human:")
        self.assertEqual(len(session.messages), 1)
        self.assertEqual(session.messages[0].content, "")

    def test_consecutive_markers_on_one_line(self):
        session = parse_session_content("Human: a Assistant: b Human: c")
        self.assertEqual([m.role for m in session.messages], ["user", "assistant", "user"])
        self.assertEqual([m.content for m in session.messages], ["a", "b", "c"])

    def test_context_is_carried(self):
        session = parse_session_content("Human: hi", context="sprint 4")
        self.assertEqual(session.context, "sprint 4")


if __name__ == "__main__":
    unittest.main()
