import logging

from .errors import PatternError, InputTypeError
from .lines import split_lines
from .matcher import compute_matches
from .navigation import MatchNavigator
from .extractor import EntryCollection, extract_entries

logger = logging.getLogger(__name__)


class LogSession:
    """
    Holds one log text and everything derived from it.

    Changing the text or the pattern recomputes the derived values and resets
    the navigator before returning, so the cursor never refers to a match
    sequence that no longer exists.
    """

    def __init__(self, text="", case_sensitive=False, is_regex=True):
        self.text = ""
        self.lines = [""]
        self.pattern = ""
        self.case_sensitive = case_sensitive
        self.is_regex = is_regex
        self.pattern_error = None
        self.line_matches = {}
        self.navigator = MatchNavigator()
        self.errors = EntryCollection()
        self.debug_entries = EntryCollection()
        if text:
            self.set_text(text)

    @property
    def line_count(self):
        return len(self.lines)

    @property
    def flat_matches(self):
        return self.navigator.matches

    def line(self, index):
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def spans_for_line(self, index):
        return self.line_matches.get(index, [])

    def set_text(self, text):
        if not isinstance(text, str):
            raise InputTypeError("text", "a str", text)
        self.text = text
        self.lines = split_lines(text)
        self.errors, self.debug_entries = extract_entries(self.lines)
        logger.info("Loaded %d lines (%d errors, %d flagged debug entries)",
                    len(self.lines), len(self.errors), len(self.debug_entries))
        try:
            self._recompute()
        except PatternError as e:
            # Still recorded in pattern_error; the new text is loaded regardless.
            logger.debug("Kept invalid pattern across text change: %s", e)

    def set_pattern(self, pattern, case_sensitive=None, is_regex=None):
        """
        Runs a new search. On PatternError the highlights are cleared, the
        error is kept in pattern_error and re-raised for the caller to show.
        """
        if not isinstance(pattern, str):
            raise InputTypeError("pattern", "a str", pattern)
        self.pattern = pattern
        if case_sensitive is not None:
            self.case_sensitive = case_sensitive
        if is_regex is not None:
            self.is_regex = is_regex
        self._recompute()

    def clear_search(self):
        self.set_pattern("")

    def _recompute(self):
        try:
            self.line_matches, flat = compute_matches(
                self.lines, self.pattern, self.case_sensitive, self.is_regex)
        except PatternError as e:
            self.pattern_error = e
            self.line_matches = {}
            self.navigator.set_matches([])
            raise
        self.pattern_error = None
        self.navigator.set_matches(flat)

    def current_match(self):
        return self.navigator.current()

    def next_match(self):
        return self.navigator.next()

    def previous_match(self):
        return self.navigator.previous()

    def match_count_label(self):
        if self.pattern_error is not None:
            return str(self.pattern_error)
        return self.navigator.match_count_label()
