from PySide6.QtWidgets import (QDockWidget, QTreeWidget, QTreeWidgetItem, QHeaderView,
                               QWidget, QVBoxLayout, QPlainTextEdit, QSplitter)
from PySide6.QtCore import Qt, Signal, QObject
from PySide6.QtGui import QFont


class EntriesPanel(QObject):
    """
    Dock listing the deduplicated error entries and the flagged debug
    entries of the current log, with the selected entry's JSON below.
    """
    navigation_requested = Signal(int)  # line index

    def __init__(self, main_window):
        super().__init__()
        self.main_window = main_window
        self.setup_ui()

    def setup_ui(self):
        self.dock = QDockWidget("Entries", self.main_window)
        self.dock.setObjectName("EntriesDock")
        self.dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea | Qt.BottomDockWidgetArea)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        splitter = QSplitter(Qt.Vertical)

        self.tree = QTreeWidget()
        self.tree.setHeaderLabels(["Line", "Message"])
        self.tree.header().setSectionResizeMode(0, QHeaderView.ResizeToContents)
        self.tree.header().setSectionResizeMode(1, QHeaderView.Stretch)
        self.tree.itemDoubleClicked.connect(self.on_item_double_clicked)
        self.tree.currentItemChanged.connect(self.on_current_item_changed)

        self.errors_root = QTreeWidgetItem(self.tree, ["", "Errors (0)"])
        self.debug_root = QTreeWidgetItem(self.tree, ["", "Debug (0)"])
        for root in (self.errors_root, self.debug_root):
            root.setFirstColumnSpanned(True)
            root.setExpanded(True)

        self.detail = QPlainTextEdit()
        self.detail.setReadOnly(True)
        font = QFont("Consolas", 10)
        font.setStyleHint(QFont.Monospace)
        self.detail.setFont(font)

        splitter.addWidget(self.tree)
        splitter.addWidget(self.detail)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        layout.addWidget(splitter)

        self.dock.setWidget(container)
        self.main_window.addDockWidget(Qt.RightDockWidgetArea, self.dock)

    def set_entries(self, errors, debug_entries):
        self.detail.clear()
        self._fill(self.errors_root, "Errors", errors)
        self._fill(self.debug_root, "Debug", debug_entries)

    def _fill(self, root, title, entries):
        root.takeChildren()
        count = 0
        for entry in entries:
            item = QTreeWidgetItem(root)
            item.setText(0, str(entry.line + 1) if entry.line is not None else "")
            item.setText(1, entry.message.replace("\n", " "))
            item.setToolTip(1, entry.message)
            item.setData(0, Qt.UserRole, entry.line)
            item.setData(1, Qt.UserRole, entry.pretty)
            count += 1
        root.setText(1, f"{title} ({count})")

    def on_current_item_changed(self, current, previous):
        if current is None or current.parent() is None:
            self.detail.clear()
            return
        self.detail.setPlainText(current.data(1, Qt.UserRole) or "")

    def on_item_double_clicked(self, item, column):
        line = item.data(0, Qt.UserRole)
        if line is not None:
            self.navigation_requested.emit(line)

    def toggle_view(self):
        if self.dock.isHidden():
            self.dock.show()
        else:
            self.dock.hide()
