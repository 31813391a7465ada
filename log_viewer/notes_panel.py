import os
import logging

from PySide6.QtWidgets import (QDockWidget, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
                               QPlainTextEdit, QFileDialog, QMessageBox)
from PySide6.QtCore import Qt, QObject, QMarginsF
from PySide6.QtGui import QPdfWriter, QPageSize, QPageLayout, QTextDocument, QFont

logger = logging.getLogger(__name__)


def export_notes_pdf(text, filepath):
    """Writes plain text notes to a PDF file."""
    writer = QPdfWriter(filepath)
    writer.setPageSize(QPageSize(QPageSize.PageSizeId.A4))
    writer.setPageMargins(QMarginsF(10, 10, 10, 10), QPageLayout.Unit.Millimeter)
    writer.setTitle("Notes")

    doc = QTextDocument()
    doc.setDefaultFont(QFont("Consolas", 10))
    doc.setPlainText(text)
    doc.print_(writer)


class NotesPanel(QObject):
    """Free text notes kept next to the log, in memory only."""

    def __init__(self, main_window):
        super().__init__()
        self.main_window = main_window
        self.setup_ui()

    def setup_ui(self):
        self.dock = QDockWidget("Notes", self.main_window)
        self.dock.setObjectName("NotesDock")
        self.dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea | Qt.BottomDockWidgetArea)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.editor = QPlainTextEdit()
        self.editor.setPlaceholderText("Write your notes here...")
        layout.addWidget(self.editor)

        btn_bar = QWidget()
        btn_layout = QHBoxLayout(btn_bar)
        btn_layout.setContentsMargins(5, 5, 5, 5)

        self.btn_upper = QPushButton("Uppercase")
        self.btn_upper.clicked.connect(self.to_upper)
        self.btn_lower = QPushButton("Lowercase")
        self.btn_lower.clicked.connect(self.to_lower)
        self.btn_clear = QPushButton("Clear")
        self.btn_clear.clicked.connect(self.clear)
        self.btn_pdf = QPushButton("Download PDF")
        self.btn_pdf.clicked.connect(self.export_pdf)

        for btn in (self.btn_upper, self.btn_lower, self.btn_clear):
            btn_layout.addWidget(btn)
        btn_layout.addStretch()
        btn_layout.addWidget(self.btn_pdf)
        layout.addWidget(btn_bar)

        self.dock.setWidget(container)
        self.main_window.addDockWidget(Qt.BottomDockWidgetArea, self.dock)
        self.dock.hide()

    def text(self):
        return self.editor.toPlainText()

    def to_upper(self):
        self.editor.setPlainText(self.text().upper())

    def to_lower(self):
        self.editor.setPlainText(self.text().lower())

    def clear(self):
        self.editor.clear()

    def export_pdf(self):
        start_dir = self.main_window.config.last_dir or ""
        filepath, _ = QFileDialog.getSaveFileName(self.main_window, "Save Notes as PDF",
                                                  os.path.join(start_dir, "notes.pdf"), "PDF Files (*.pdf)")
        if not filepath:
            return
        try:
            export_notes_pdf(self.text(), filepath)
        except OSError as e:
            logger.error("Export failed: %s", e)
            QMessageBox.critical(self.main_window, "Error", f"Export failed: {e}")
            return
        self.main_window.update_status_bar(f"Notes exported to {os.path.basename(filepath)}")

    def toggle_view(self):
        if self.dock.isHidden():
            self.dock.show()
        else:
            self.dock.hide()
