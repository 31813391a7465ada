import os
import time
import logging

from PySide6.QtCore import QObject, QTimer, Signal

from .core import PatternError

logger = logging.getLogger(__name__)


class LogController(QObject):
    """
    Hands log text from a file or a paste to the session.
    """
    log_loaded = Signal(str)   # source label (file path or "Pasted logs")
    load_failed = Signal(str)  # error message

    PASTE_SOURCE = "Pasted logs"

    def __init__(self, session, config):
        super().__init__()
        self.session = session
        self.config = config
        self.current_source = None
        self.last_load_duration = 0.0

    def load_file(self, filepath):
        if not filepath:
            return False

        encoding = self.config.default_encoding
        try:
            with open(filepath, "r", encoding=encoding, errors="replace", newline="") as f:
                text = f.read()
        except (OSError, LookupError) as e:
            logger.error("Error loading log %s: %s", filepath, e)
            self.load_failed.emit(f"Could not open {os.path.basename(filepath)}: {e}")
            return False

        self.config.last_dir = os.path.dirname(os.path.abspath(filepath))
        self._apply(text, os.path.abspath(filepath))
        return True

    def load_text(self, text):
        self._apply(text, self.PASTE_SOURCE)
        return True

    def _apply(self, text, source):
        start_time = time.time()
        self.session.set_text(text)
        self.last_load_duration = time.time() - start_time
        self.current_source = source
        logger.info("Loaded %s: %d lines in %.3fs", source, self.session.line_count, self.last_load_duration)
        self.log_loaded.emit(source)


class SearchController(QObject):
    """
    Runs searches against the session.

    Typed queries are debounced with a single-shot timer; find_next() and
    find_previous() flush a pending query first, so Enter always searches
    what is in the box.
    """
    results_ready = Signal()          # matches were recomputed
    current_changed = Signal(object)  # (line, (start, end)) or None
    pattern_failed = Signal(str)

    def __init__(self, session, config):
        super().__init__()
        self.session = session
        self.config = config
        self._pending_query = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(config.debounce_ms)
        self._timer.timeout.connect(self.apply_pending)

    @property
    def has_pending(self):
        return self._pending_query is not None

    def set_query(self, query):
        """Schedules a search for query after the debounce interval."""
        self._pending_query = query
        self._timer.start(self.config.debounce_ms)

    def apply_pending(self):
        """
        Runs the pending query now. Returns True when that started a new
        search, False when nothing was pending or the query is unchanged.
        """
        self._timer.stop()
        if self._pending_query is None:
            return False
        query = self._pending_query
        self._pending_query = None
        if query == self.session.pattern and self.session.pattern_error is None:
            return False
        self.search(query)
        return True

    def search(self, query):
        self._timer.stop()
        self._pending_query = None
        try:
            self.session.set_pattern(query, self.config.case_sensitive, self.config.is_regex)
        except PatternError as e:
            logger.debug("Rejected pattern: %s", e)
            self.results_ready.emit()
            self.current_changed.emit(None)
            self.pattern_failed.emit(str(e))
            return False

        self.config.add_search_history(query)
        self.results_ready.emit()
        self.current_changed.emit(self.session.current_match())
        return True

    def set_options(self, case_sensitive, is_regex):
        self.config.set_search_options(case_sensitive, is_regex)
        query = self._pending_query if self._pending_query is not None else self.session.pattern
        return self.search(query)

    def clear(self):
        return self.search("")

    def refresh(self):
        """Re-announces results after the session text changed."""
        self.results_ready.emit()
        self.current_changed.emit(self.session.current_match())

    def find_next(self):
        if self.apply_pending():
            return self.session.current_match()
        match = self.session.next_match()
        self.current_changed.emit(match)
        return match

    def find_previous(self):
        if self.apply_pending():
            return self.session.current_match()
        match = self.session.previous_match()
        self.current_changed.emit(match)
        return match

    def find_from_line(self, line_index, backward=False):
        match = self.session.navigator.seek(line_index, backward)
        self.current_changed.emit(match)
        return match

    def step_from_line(self, line_index, backward=False):
        """
        Enter / Shift+Enter in the log list. On the focused match's line this
        steps one match; from any other selected line it continues from there.
        """
        current = self.session.current_match()
        if line_index is None or (current is not None and current[0] == line_index):
            return self.find_previous() if backward else self.find_next()
        return self.find_from_line(line_index, backward)
