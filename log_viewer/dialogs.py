from PySide6.QtWidgets import QDialog, QVBoxLayout, QHBoxLayout, QPushButton, QPlainTextEdit
from PySide6.QtGui import QFont


class PasteLogDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Paste Your Logs")
        self.resize(700, 400)
        self.log_text = None

        layout = QVBoxLayout(self)

        self.text_edit = QPlainTextEdit()
        self.text_edit.setPlaceholderText("Paste log data here...")
        font = QFont("Consolas", 10)
        font.setStyleHint(QFont.Monospace)
        self.text_edit.setFont(font)
        layout.addWidget(self.text_edit)

        btn_layout = QHBoxLayout()
        btn_apply = QPushButton("Apply Logs")
        btn_apply.setDefault(True)
        btn_apply.clicked.connect(self.apply)
        btn_cancel = QPushButton("Cancel")
        btn_cancel.clicked.connect(self.reject)

        btn_layout.addStretch()
        btn_layout.addWidget(btn_cancel)
        btn_layout.addWidget(btn_apply)
        layout.addLayout(btn_layout)

        self.text_edit.setFocus()

    def apply(self):
        self.log_text = self.text_edit.toPlainText()
        self.accept()
