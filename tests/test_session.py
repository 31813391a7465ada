import json
import unittest

from log_viewer.core import LogSession, PatternError, InputTypeError


SAMPLE = "\n".join([
    "2024-05-01 boot ok",
    json.dumps({"level": "ERROR", "message": "disk write failed now"}),
    json.dumps({"level": "DEBUG", "message": "cache refresh failed"}),
    json.dumps({"level": "ERROR", "message": "disk write failed again"}),
    "shutdown",
])


class TestLogSession(unittest.TestCase):
    def test_scenario_search(self):
        session = LogSession("foo\nbar\nfoobar")
        session.set_pattern("foo")
        self.assertEqual(session.line_matches, {0: [(0, 3)], 2: [(0, 3)]})
        self.assertEqual(session.flat_matches, [(0, (0, 3)), (2, (0, 3))])
        self.assertEqual(session.match_count_label(), "Match 1 of 2")
        session.next_match()
        self.assertEqual(session.navigator.cursor, 1)
        session.next_match()
        self.assertEqual(session.navigator.cursor, 0)

    def test_empty_pattern(self):
        session = LogSession("foo\nbar\nfoobar")
        session.set_pattern("")
        self.assertEqual(session.line_matches, {})
        self.assertEqual(session.flat_matches, [])
        self.assertEqual(session.match_count_label(), "No matches")

    def test_text_change_resets_cursor_and_reruns_search(self):
        session = LogSession("a x\nx\nx x")
        session.set_pattern("x")
        session.previous_match()
        self.assertEqual(session.navigator.cursor, 3)

        session.set_text("x")
        self.assertEqual(session.flat_matches, [(0, (0, 1))])
        self.assertEqual(session.navigator.cursor, 0)
        self.assertEqual(session.current_match(), (0, (0, 1)))

    def test_text_change_to_no_matches(self):
        session = LogSession("x\nx")
        session.set_pattern("x")
        session.next_match()
        session.set_text("nothing")
        self.assertIsNone(session.navigator.cursor)
        self.assertIsNone(session.current_match())

    def test_entries_extracted_on_load(self):
        session = LogSession(SAMPLE)
        self.assertEqual(session.line_count, 5)
        self.assertEqual([e.line for e in session.errors], [1])
        self.assertEqual([e.message for e in session.debug_entries], ["cache refresh failed"])

    def test_invalid_pattern(self):
        session = LogSession("foo\nbar")
        session.set_pattern("foo")
        with self.assertRaises(PatternError):
            session.set_pattern("foo(")
        self.assertIsNotNone(session.pattern_error)
        self.assertEqual(session.line_matches, {})
        self.assertIsNone(session.navigator.cursor)
        self.assertIn("foo(", session.match_count_label())

        # Loading new text keeps the error without raising
        session.set_text("foo(")
        self.assertIsNotNone(session.pattern_error)

        session.set_pattern("bar")
        self.assertIsNone(session.pattern_error)
        self.assertEqual(session.match_count_label(), "No matches")

    def test_search_options(self):
        session = LogSession("Foo\nfoo\nf.o")
        session.set_pattern("foo", case_sensitive=True)
        self.assertEqual(list(session.line_matches), [1])
        session.set_pattern("f.o", case_sensitive=False, is_regex=False)
        self.assertEqual(list(session.line_matches), [2])
        session.set_pattern("f.o", is_regex=True)
        self.assertEqual(list(session.line_matches), [0, 1, 2])

    def test_line_access(self):
        session = LogSession("a\nb")
        self.assertEqual(session.line(1), "b")
        self.assertIsNone(session.line(2))
        self.assertEqual(session.spans_for_line(0), [])

    def test_clear_search(self):
        session = LogSession("foo")
        session.set_pattern("o")
        session.clear_search()
        self.assertEqual(session.pattern, "")
        self.assertFalse(session.navigator)

    def test_rejects_bad_types(self):
        session = LogSession()
        with self.assertRaises(InputTypeError):
            session.set_text(None)
        with self.assertRaises(InputTypeError):
            session.set_pattern(5)


if __name__ == '__main__':
    unittest.main()
