import json
import unittest

from log_viewer.core import (extract_entries, parse_entry, message_signature,
                             EntryCollection, StructuredEntry, split_lines)


def entry_line(level, message, prefix="", **extra):
    data = {"level": level, "message": message}
    data.update(extra)
    return prefix + json.dumps(data)


class TestSignature(unittest.TestCase):
    def test_first_three_words(self):
        self.assertEqual(message_signature("disk write failed now"), "disk write failed")
        self.assertEqual(message_signature("  disk\twrite   failed  later"), "disk write failed")

    def test_short_messages(self):
        self.assertEqual(message_signature("timeout"), "timeout")
        self.assertEqual(message_signature(""), "")


class TestParseEntry(unittest.TestCase):
    def test_plain_json_line(self):
        entry = parse_entry('{"level":"ERROR","message":"disk write failed now"}', 4)
        self.assertEqual(entry.level, "ERROR")
        self.assertEqual(entry.message, "disk write failed now")
        self.assertEqual(entry.line, 4)
        self.assertEqual(entry.signature, "disk write failed")
        self.assertEqual(json.loads(entry.pretty), entry.data)

    def test_json_after_prefix(self):
        entry = parse_entry(entry_line("ERROR", "boom goes here", prefix="2024-05-01 12:00:00 app: "))
        self.assertIsNotNone(entry)
        self.assertEqual(entry.message, "boom goes here")

    def test_braces_in_prefix(self):
        entry = parse_entry(entry_line("ERROR", "boom goes here", prefix="worker[{id}] "))
        self.assertIsNotNone(entry)
        self.assertEqual(entry.level, "ERROR")

    def test_nested_log_field(self):
        inner = json.dumps({"level": "DEBUG", "message": "request failed upstream"})
        entry = parse_entry(json.dumps({"log": inner, "stream": "stderr"}))
        self.assertEqual(entry.level, "DEBUG")
        self.assertEqual(entry.message, "request failed upstream")
        self.assertEqual(entry.data, {"level": "DEBUG", "message": "request failed upstream"})

    def test_nested_log_not_json_is_skipped(self):
        self.assertIsNone(parse_entry(json.dumps({"log": "plain text", "message": "x"})))

    def test_skips(self):
        bad_lines = [
            "no json here",
            "{not json}",
            '{"level":"ERROR"}',
            '{"level":"ERROR","message":42}',
            "[1, 2, 3]",
            '{"level":"ERROR","message":"unterminated"',
            "",
        ]
        for line in bad_lines:
            with self.subTest(line=line):
                self.assertIsNone(parse_entry(line))


class TestExtractEntries(unittest.TestCase):
    def test_error_dedup_first_seen_wins(self):
        lines = [
            entry_line("ERROR", "disk write failed now"),
            "ordinary text",
            entry_line("ERROR", "disk write failed again later", host="b"),
        ]
        errors, debug = extract_entries(lines)
        self.assertEqual(len(errors), 1)
        self.assertEqual(len(debug), 0)
        entry = errors.entries()[0]
        self.assertEqual(entry.line, 0)
        self.assertEqual(entry.pretty, json.dumps({"level": "ERROR", "message": "disk write failed now"}, indent=2))

    def test_debug_requires_failure_keyword(self):
        lines = [
            entry_line("DEBUG", "cache warmed up fine"),
            entry_line("DEBUG", "cache warm up failed"),
        ]
        errors, debug = extract_entries(lines)
        self.assertEqual(len(errors), 0)
        self.assertEqual([e.message for e in debug], ["cache warm up failed"])
        self.assertEqual(debug.entries()[0].line, 1)

    def test_debug_keyword_variants(self):
        messages = ["got an Error back", "ERROR path taken", "Failure in step", "task FAILED badly", "will fail soon"]
        lines = [entry_line("DEBUG", m) for m in messages]
        _, debug = extract_entries(lines)
        self.assertEqual(len(debug), len(messages))

    def test_other_levels_ignored(self):
        lines = [entry_line("INFO", "request failed but retried"), entry_line("WARN", "error rate high"),
                 entry_line("error", "lowercase level is not ERROR")]
        errors, debug = extract_entries(lines)
        self.assertEqual((len(errors), len(debug)), (0, 0))

    def test_deeply_nested_json_is_skipped(self):
        deep = '{"level":"ERROR","message":"x y z","a":' + "[" * 100000 + "}"
        nested = json.dumps({"log": '{"level":"ERROR","message":"a b c","d":' + "[" * 100000 + "}"})
        lines = ["ok", deep, nested, entry_line("ERROR", "still found here")]
        errors, debug = extract_entries(lines)
        self.assertEqual([e.line for e in errors], [3])
        self.assertEqual(len(debug), 0)

    def test_brace_heavy_line(self):
        line = "{" * 5000 + " " + entry_line("ERROR", "after many braces")
        entry = parse_entry(line)
        self.assertIsNotNone(entry)
        self.assertEqual(entry.message, "after many braces")

    def test_order_is_first_seen(self):
        lines = [
            entry_line("ERROR", "zeta failure one"),
            entry_line("ERROR", "alpha failure two"),
            entry_line("ERROR", "zeta failure one again"),
            entry_line("ERROR", "mid failure three"),
        ]
        errors, _ = extract_entries(lines)
        self.assertEqual([e.signature for e in errors], ["zeta failure one", "alpha failure two", "mid failure three"])
        self.assertEqual([e.line for e in errors], [0, 1, 3])

    def test_deterministic(self):
        text = "\n".join([
            entry_line("ERROR", "a b c d"),
            "junk {",
            entry_line("DEBUG", "x y failed"),
            entry_line("ERROR", "a b c e"),
        ])
        first = extract_entries(split_lines(text))
        second = extract_entries(split_lines(text))
        self.assertEqual(first[0].entries(), second[0].entries())
        self.assertEqual(first[1].entries(), second[1].entries())

    def test_bad_input_never_raises(self):
        lines = ["{", "}", "{}", '{"log": 5}', '{"log": "{bad"}', '{"message": null}', None, 17,
                 '{"level":"ERROR","message":"x y z","a":' + "[" * 100000 + "}"]
        errors, debug = extract_entries(lines)
        self.assertEqual((len(errors), len(debug)), (0, 0))

    def test_batches_merge_like_whole_text(self):
        lines = [
            entry_line("ERROR", "one two three"),
            entry_line("DEBUG", "retry failed here"),
            entry_line("ERROR", "one two three four"),
            entry_line("ERROR", "other thing broke"),
        ]
        whole_errors, whole_debug = extract_entries(lines)
        e1, d1 = extract_entries(lines[:2])
        e2, d2 = extract_entries(lines[2:], start_line=2)
        e1.merge(e2)
        d1.merge(d2)
        self.assertEqual(e1.entries(), whole_errors.entries())
        self.assertEqual(d1.entries(), whole_debug.entries())

    def test_custom_keywords(self):
        lines = [entry_line("DEBUG", "request timeout reached")]
        _, debug = extract_entries(lines, keywords=("timeout",))
        self.assertEqual(len(debug), 1)


class TestEntryCollection(unittest.TestCase):
    def test_add_and_lookup(self):
        collection = EntryCollection()
        first = StructuredEntry("ERROR", "a b c d", {"message": "a b c d"}, 0)
        dup = StructuredEntry("ERROR", "a b c z", {"message": "a b c z"}, 3)
        self.assertTrue(collection.add(first))
        self.assertFalse(collection.add(dup))
        self.assertIn("a b c", collection)
        self.assertIs(collection.get("a b c"), first)
        self.assertEqual(len(collection), 1)


if __name__ == '__main__':
    unittest.main()
