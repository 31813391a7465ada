import unittest

from log_viewer.core import MatchNavigator, compute_matches, split_lines


def scenario_matches():
    _, flat = compute_matches(split_lines("foo\nbar\nfoobar"), "foo")
    return flat


class TestMatchNavigator(unittest.TestCase):
    def test_reset_selects_first_match(self):
        nav = MatchNavigator(scenario_matches())
        self.assertEqual(nav.cursor, 0)
        self.assertEqual(nav.current(), (0, (0, 3)))
        self.assertEqual(nav.match_count_label(), "Match 1 of 2")

    def test_next_wraps_to_first(self):
        nav = MatchNavigator(scenario_matches())
        self.assertEqual(nav.next(), (2, (0, 3)))
        self.assertEqual(nav.cursor, 1)
        self.assertEqual(nav.match_count_label(), "Match 2 of 2")
        self.assertEqual(nav.next(), (0, (0, 3)))
        self.assertEqual(nav.cursor, 0)

    def test_previous_wraps_to_last(self):
        nav = MatchNavigator(scenario_matches())
        self.assertEqual(nav.previous(), (2, (0, 3)))
        self.assertEqual(nav.cursor, 1)
        nav.previous()
        self.assertEqual(nav.cursor, 0)

    def test_full_cycle_returns_to_start(self):
        flat = [(i // 2, (i, i + 1)) for i in range(7)]
        for start in range(len(flat)):
            nav = MatchNavigator(flat)
            nav.cursor = start
            for _ in range(len(flat)):
                nav.next()
            self.assertEqual(nav.cursor, start)
            for _ in range(len(flat)):
                nav.previous()
            self.assertEqual(nav.cursor, start)

    def test_cursor_stays_in_range(self):
        nav = MatchNavigator([(0, (0, 1)), (1, (0, 1)), (3, (2, 4))])
        for step in [nav.next] * 5 + [nav.previous] * 8:
            step()
            self.assertTrue(0 <= nav.cursor < nav.count)

    def test_empty_sequence_is_noop(self):
        nav = MatchNavigator()
        self.assertIsNone(nav.cursor)
        self.assertIsNone(nav.next())
        self.assertIsNone(nav.previous())
        self.assertIsNone(nav.current())
        self.assertIsNone(nav.cursor)
        self.assertFalse(nav)
        self.assertEqual(len(nav), 0)
        self.assertEqual(nav.match_count_label(), "No matches")

    def test_reset_is_idempotent(self):
        nav = MatchNavigator(scenario_matches())
        nav.next()
        nav.reset()
        first = nav.cursor
        nav.reset()
        self.assertEqual(nav.cursor, first)
        self.assertEqual(first, 0)

        empty = MatchNavigator()
        empty.reset()
        empty.reset()
        self.assertIsNone(empty.cursor)

    def test_set_matches_resets_stale_cursor(self):
        nav = MatchNavigator([(0, (0, 1)), (1, (0, 1)), (2, (0, 1))])
        nav.previous()
        self.assertEqual(nav.cursor, 2)
        nav.set_matches([(5, (1, 2))])
        self.assertEqual(nav.cursor, 0)
        nav.set_matches([])
        self.assertIsNone(nav.cursor)
        self.assertEqual(nav.match_count_label(), "No matches")

    def test_seek_forward_from_line(self):
        nav = MatchNavigator([(0, (0, 1)), (2, (0, 1)), (2, (4, 5)), (5, (0, 1))])
        self.assertEqual(nav.seek(2), (5, (0, 1)))
        self.assertEqual(nav.cursor, 3)
        self.assertEqual(nav.seek(1), (2, (0, 1)))
        self.assertEqual(nav.seek(5), (0, (0, 1)))

    def test_seek_backward_from_line(self):
        nav = MatchNavigator([(0, (0, 1)), (2, (0, 1)), (2, (4, 5)), (5, (0, 1))])
        self.assertEqual(nav.seek(5, backward=True), (2, (4, 5)))
        self.assertEqual(nav.seek(2, backward=True), (0, (0, 1)))
        self.assertEqual(nav.seek(0, backward=True), (5, (0, 1)))

    def test_seek_on_empty(self):
        nav = MatchNavigator()
        self.assertIsNone(nav.seek(3))
        self.assertIsNone(nav.cursor)


if __name__ == '__main__':
    unittest.main()
