from PySide6.QtCore import QAbstractListModel, Qt, QModelIndex
from PySide6.QtGui import QColor

RawIndexRole = Qt.UserRole + 1
SpansRole = Qt.UserRole + 2
FocusSpanRole = Qt.UserRole + 3


class LogModel(QAbstractListModel):
    """
    Exposes the session's lines through a virtual viewport: Qt only sees
    viewport_size rows starting at viewport_start, the scrollbar in the main
    window moves the window over the full line list.
    """

    def __init__(self, session=None):
        super().__init__()
        self.session = session
        self.focus = None  # (line, (start, end)) of the current match
        self.focus_bg_color = QColor("#3a3d41")

        self.viewport_start = 0
        self.viewport_size = 200

    def set_session(self, session):
        self.beginResetModel()
        self.session = session
        self.focus = None
        self.viewport_start = 0
        self.endResetModel()

    def reload(self):
        """Call after the session text changed."""
        self.beginResetModel()
        self.focus = self.session.current_match() if self.session else None
        self.viewport_start = 0
        self.endResetModel()

    def refresh_matches(self):
        """Call after the search pattern changed; the rows stay the same."""
        self.focus = self.session.current_match() if self.session else None
        self._emit_visible_changed()

    def set_focus(self, flat_match):
        self.focus = flat_match
        self._emit_visible_changed()

    def set_theme_mode(self, is_dark):
        self.focus_bg_color = QColor("#3a3d41") if is_dark else QColor("#fffbdd")
        self._emit_visible_changed()

    def set_viewport(self, start, size):
        if self.viewport_start == start and self.viewport_size == size:
            return

        self.layoutAboutToBeChanged.emit()
        self.viewport_start = start
        self.viewport_size = size
        self.layoutChanged.emit()

    def total_count(self):
        return self.session.line_count if self.session else 0

    def raw_index(self, row):
        """Maps a visual row to a line index, or None when out of range."""
        raw = self.viewport_start + row
        if 0 <= raw < self.total_count():
            return raw
        return None

    def row_for_line(self, line_index):
        """Maps a line index to a visual row, or -1 when outside the viewport."""
        row = line_index - self.viewport_start
        if 0 <= row < self.rowCount():
            return row
        return -1

    def _emit_visible_changed(self):
        rows = self.rowCount()
        if rows:
            self.dataChanged.emit(self.index(0, 0), self.index(rows - 1, 0))

    def rowCount(self, parent=QModelIndex()):
        if parent.isValid() or not self.session:
            return 0
        remaining = self.total_count() - self.viewport_start
        if remaining < 0:
            remaining = 0
        return min(self.viewport_size, remaining)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid() or not self.session:
            return None

        raw_index = self.raw_index(index.row())
        if raw_index is None:
            return None

        if role == RawIndexRole:
            return raw_index

        if role == Qt.DisplayRole:
            return self.session.lines[raw_index].rstrip("\r")

        if role == SpansRole:
            return self.session.spans_for_line(raw_index)

        if role == FocusSpanRole:
            if self.focus is not None and self.focus[0] == raw_index:
                return self.focus[1]
            return None

        if role == Qt.BackgroundRole:
            if self.focus is not None and self.focus[0] == raw_index:
                return self.focus_bg_color

        return None
