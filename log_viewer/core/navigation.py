import bisect


class MatchNavigator:
    """
    Owns the current-match cursor over a flattened match sequence.

    The cursor is None when there are no matches, otherwise it always lies in
    [0, count). Stepping past either end wraps around.
    """

    def __init__(self, flat_matches=()):
        self._matches = list(flat_matches)
        self._match_lines = [m[0] for m in self._matches]
        self.cursor = None
        self.reset()

    def set_matches(self, flat_matches):
        """Replaces the match sequence and resets the cursor in one step."""
        self._matches = list(flat_matches)
        self._match_lines = [m[0] for m in self._matches]
        self.reset()

    @property
    def matches(self):
        return self._matches

    @property
    def count(self):
        return len(self._matches)

    def __len__(self):
        return len(self._matches)

    def __bool__(self):
        return bool(self._matches)

    def reset(self):
        self.cursor = 0 if self._matches else None
        return self.current()

    def current(self):
        if self.cursor is None:
            return None
        return self._matches[self.cursor]

    def next(self):
        if self._matches:
            self.cursor = (self.cursor + 1) % len(self._matches)
        return self.current()

    def previous(self):
        if self._matches:
            self.cursor = (self.cursor - 1) % len(self._matches)
        return self.current()

    def seek(self, line_index, backward=False):
        """
        Moves to the first match on a line after line_index, or with
        backward=True to the last match on a line before it. Wraps like
        next()/previous(). Used to continue searching from the selected row.
        """
        if not self._matches:
            return None

        if backward:
            idx = bisect.bisect_left(self._match_lines, line_index) - 1
            if idx < 0:
                idx = len(self._matches) - 1
        else:
            idx = bisect.bisect_right(self._match_lines, line_index)
            if idx >= len(self._matches):
                idx = 0

        self.cursor = idx
        return self.current()

    def match_count_label(self):
        if not self._matches:
            return "No matches"
        return f"Match {self.cursor + 1} of {len(self._matches)}"
