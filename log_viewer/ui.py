import os

from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QListView, QLabel,
                               QFileDialog, QAbstractItemView, QApplication, QToolButton, QComboBox,
                               QSizePolicy, QCheckBox, QMessageBox, QScrollBar, QStackedLayout, QMenu)
from PySide6.QtGui import QAction, QFont, QFontMetrics, QKeySequence, QShortcut
from PySide6.QtCore import Qt, QEvent

from .core import LogSession
from .config import get_config
from .controllers import LogController, SearchController
from .models import LogModel
from .delegates import LogDelegate
from .entries_panel import EntriesPanel
from .notes_panel import NotesPanel
from .dialogs import PasteLogDialog


class MainWindow(QMainWindow):
    APP_NAME = "Log Viewer"

    def __init__(self, config=None):
        super().__init__()
        self.setWindowTitle(self.APP_NAME)
        self.resize(1200, 800)

        self.config = config if config is not None else get_config()
        self.is_dark_mode = self.config.is_dark
        self.last_status_message = "Ready"

        self.session = LogSession(case_sensitive=self.config.case_sensitive, is_regex=self.config.is_regex)
        self.log_controller = LogController(self.session, self.config)
        self.search_controller = SearchController(self.session, self.config)

        self.log_controller.log_loaded.connect(self.on_log_loaded)
        self.log_controller.load_failed.connect(self.on_load_failed)
        self.search_controller.results_ready.connect(self.on_search_results)
        self.search_controller.current_changed.connect(self.on_current_match_changed)
        self.search_controller.pattern_failed.connect(self.on_pattern_failed)

        # --- Log list (virtual viewport) ---
        self.list_view = QListView()
        self.model = LogModel(self.session)
        self.list_view.setModel(self.model)
        self.delegate = LogDelegate(self.list_view)
        self.list_view.setItemDelegate(self.delegate)
        self.list_view.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.list_view.setUniformItemSizes(True)
        self.list_view.setContextMenuPolicy(Qt.CustomContextMenu)
        self.list_view.customContextMenuRequested.connect(self.show_context_menu)

        self.list_view.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.v_scrollbar = QScrollBar(Qt.Vertical)
        self.v_scrollbar.valueChanged.connect(self.on_scrollbar_value_changed)
        self.list_view.installEventFilter(self)

        font = QFont(self.config.editor_font_family, self.config.editor_font_size)
        font.setStyleHint(QFont.Monospace)
        self.list_view.setFont(font)
        self.config.editorFontChanged.connect(self.on_editor_font_changed)

        central_widget = QWidget()
        central_layout = QVBoxLayout(central_widget)
        central_layout.setContentsMargins(0, 0, 0, 0)
        central_layout.setSpacing(0)

        central_layout.addWidget(self._build_search_bar())

        stack_host = QWidget()
        self.central_stack = QStackedLayout(stack_host)

        # Page 0: Welcome
        self.welcome_label = QLabel("Open a log file (Ctrl+O)\nor paste logs (Ctrl+Shift+V)")
        self.welcome_label.setAlignment(Qt.AlignCenter)
        self.welcome_label.setFont(QFont("Consolas", 14))
        self.welcome_label.setStyleSheet("color: #888888;")
        self.central_stack.addWidget(self.welcome_label)

        # Page 1: List view + scrollbar
        list_container = QWidget()
        list_layout = QHBoxLayout(list_container)
        list_layout.setContentsMargins(0, 0, 0, 0)
        list_layout.setSpacing(0)
        list_layout.addWidget(self.list_view)
        list_layout.addWidget(self.v_scrollbar)
        self.central_stack.addWidget(list_container)
        self.central_stack.setCurrentIndex(0)

        central_layout.addWidget(stack_host)
        self.setCentralWidget(central_widget)

        # --- Docks ---
        self.entries_panel = EntriesPanel(self)
        self.entries_panel.navigation_requested.connect(self.jump_to_line)
        self.notes_panel = NotesPanel(self)

        self.status_label = QLabel("Ready")
        self.statusBar().addWidget(self.status_label, 1)

        self._create_menu()
        self.apply_theme()

    def _build_search_bar(self):
        self.search_widget = QWidget()
        self.search_widget.setObjectName("search_widget")
        layout = QHBoxLayout(self.search_widget)
        layout.setContentsMargins(5, 5, 5, 5)
        layout.setSpacing(5)

        self.search_input = QComboBox()
        self.search_input.setEditable(True)
        self.search_input.setInsertPolicy(QComboBox.NoInsert)
        self.search_input.lineEdit().setPlaceholderText("Search keyword or regex...")
        self.search_input.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.search_input.addItems(self.config.search_history)
        self.search_input.setCurrentText("")
        self.search_input.lineEdit().textEdited.connect(self.search_controller.set_query)
        self.search_input.textActivated.connect(self.search_controller.set_query)

        # Enter / Shift+Enter step through matches while typing
        self.shortcut_next = QShortcut(QKeySequence("Return"), self.search_widget)
        self.shortcut_next.activated.connect(self.find_next)
        self.shortcut_next_num = QShortcut(QKeySequence("Enter"), self.search_widget)
        self.shortcut_next_num.activated.connect(self.find_next)
        self.shortcut_prev = QShortcut(QKeySequence("Shift+Return"), self.search_widget)
        self.shortcut_prev.activated.connect(self.find_previous)
        for shortcut in (self.shortcut_next, self.shortcut_next_num, self.shortcut_prev):
            shortcut.setContext(Qt.WidgetWithChildrenShortcut)

        self.chk_case = QCheckBox("Match case")
        self.chk_case.setChecked(self.config.case_sensitive)
        self.chk_case.toggled.connect(self.on_search_options_changed)
        self.chk_regex = QCheckBox("Regex")
        self.chk_regex.setChecked(self.config.is_regex)
        self.chk_regex.toggled.connect(self.on_search_options_changed)

        self.btn_prev = QToolButton()
        self.btn_prev.setText("←")
        self.btn_prev.setToolTip("Previous match (Shift+Enter)")
        self.btn_prev.clicked.connect(self.find_previous)
        self.btn_next = QToolButton()
        self.btn_next.setText("→")
        self.btn_next.setToolTip("Next match (Enter)")
        self.btn_next.clicked.connect(self.find_next)

        self.btn_clear_search = QToolButton()
        self.btn_clear_search.setText("Clear")
        self.btn_clear_search.clicked.connect(self.clear_search)

        self.search_info_label = QLabel("")
        self.search_info_label.setMinimumWidth(120)
        self.search_info_label.setContentsMargins(5, 0, 5, 0)

        layout.addWidget(self.search_input)
        layout.addWidget(self.chk_case)
        layout.addWidget(self.chk_regex)
        layout.addWidget(self.btn_prev)
        layout.addWidget(self.btn_next)
        layout.addWidget(self.search_info_label)
        layout.addWidget(self.btn_clear_search)
        self._update_nav_buttons()
        return self.search_widget

    def _create_menu(self):
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("&File")

        open_action = QAction("&Open Log...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.open_file_dialog)
        file_menu.addAction(open_action)

        paste_action = QAction("&Paste Logs...", self)
        paste_action.setShortcut("Ctrl+Shift+V")
        paste_action.triggered.connect(self.open_paste_dialog)
        file_menu.addAction(paste_action)

        file_menu.addSeparator()
        exit_action = QAction("E&xit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        edit_menu = menu_bar.addMenu("&Edit")
        copy_action = QAction("&Copy", self)
        copy_action.setShortcut(QKeySequence.Copy)
        copy_action.triggered.connect(self.copy_selection)
        self.list_view.addAction(copy_action)
        edit_menu.addAction(copy_action)

        find_action = QAction("&Find...", self)
        find_action.setShortcut(QKeySequence.Find)
        find_action.triggered.connect(self.focus_search)
        edit_menu.addAction(find_action)

        next_action = QAction("Find Next", self)
        next_action.setShortcut("F3")
        next_action.triggered.connect(self.find_next)
        edit_menu.addAction(next_action)

        prev_action = QAction("Find Previous", self)
        prev_action.setShortcut("Shift+F3")
        prev_action.triggered.connect(self.find_previous)
        edit_menu.addAction(prev_action)

        clear_action = QAction("Clear Search", self)
        clear_action.setShortcut("Esc")
        clear_action.triggered.connect(self.clear_search)
        self.addAction(clear_action)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self.entries_panel.dock.toggleViewAction())
        view_menu.addAction(self.notes_panel.dock.toggleViewAction())
        view_menu.addSeparator()
        toggle_theme_action = QAction("Toggle Dark/Light Mode", self)
        toggle_theme_action.triggered.connect(self.toggle_theme)
        view_menu.addAction(toggle_theme_action)

    # --- Loading ---
    def open_file_dialog(self):
        filepath, _ = QFileDialog.getOpenFileName(self, "Open Log File", self.config.last_dir,
                                                  "Log Files (*.log *.txt);;All Files (*)")
        if filepath:
            self.load_log(filepath)

    def open_paste_dialog(self):
        dialog = PasteLogDialog(self)
        if dialog.exec() and dialog.log_text is not None:
            self.log_controller.load_text(dialog.log_text)

    def load_log(self, filepath):
        self.update_status_bar(f"Loading {filepath}...")
        return self.log_controller.load_file(filepath)

    def on_log_loaded(self, source):
        self.central_stack.setCurrentIndex(1)
        count = self.session.line_count
        self.delegate.set_max_line_number(count)
        self.model.reload()
        self.entries_panel.set_entries(self.session.errors, self.session.debug_entries)

        name = source if source == LogController.PASTE_SOURCE else os.path.basename(source)
        self.setWindowTitle(f"{name} - {self.APP_NAME}")
        self.update_status_bar(f"{count:,} lines loaded in {self.log_controller.last_load_duration:.3f}s")

        self.update_scrollbar_range()
        self.v_scrollbar.setValue(0)
        self.search_controller.refresh()

    def on_load_failed(self, message):
        self.update_status_bar(message)
        QMessageBox.critical(self, "Error", message)

    # --- Search ---
    def focus_search(self):
        self.search_input.setFocus()
        self.search_input.lineEdit().selectAll()

    def find_next(self):
        self.search_controller.find_next()

    def find_previous(self):
        self.search_controller.find_previous()

    def clear_search(self):
        self.search_input.setCurrentText("")
        self.search_controller.clear()
        self.list_view.setFocus()

    def on_search_options_changed(self):
        self.search_controller.set_options(self.chk_case.isChecked(), self.chk_regex.isChecked())

    def on_search_results(self):
        self.model.refresh_matches()
        if self.session.pattern_error is None:
            self.search_input.lineEdit().setStyleSheet("")
        self._refresh_history()
        self._update_search_label()

    def on_pattern_failed(self, message):
        self.search_input.lineEdit().setStyleSheet("color: #f14c4c;")
        self.search_info_label.setText("Invalid pattern")
        self.search_info_label.setToolTip(message)
        self.update_status_bar(message)

    def on_current_match_changed(self, match):
        self.model.set_focus(match)
        self._update_search_label()
        if match is not None:
            self.jump_to_line(match[0])

    def _update_search_label(self):
        if self.session.pattern_error is not None:
            return
        self.search_info_label.setToolTip("")
        self.search_info_label.setText(self.session.match_count_label() if self.session.pattern else "")
        self._update_nav_buttons()

    def _update_nav_buttons(self):
        has_matches = bool(self.session.navigator)
        self.btn_prev.setEnabled(has_matches)
        self.btn_next.setEnabled(has_matches)

    def _refresh_history(self):
        current = self.search_input.currentText()
        self.search_input.blockSignals(True)
        self.search_input.clear()
        self.search_input.addItems(self.config.search_history)
        self.search_input.setCurrentText(current)
        self.search_input.blockSignals(False)

    # --- Viewport ---
    def calculate_viewport_size(self):
        h = self.list_view.viewport().height()
        if h <= 0: return 100

        row_height = QFontMetrics(self.list_view.font()).height()
        if row_height <= 0: row_height = 20

        # Generous buffer to cover resizing and scrolling gaps
        return (h // row_height) + 100

    def on_scrollbar_value_changed(self, value):
        self.model.set_viewport(value, self.calculate_viewport_size())

    def update_scrollbar_range(self):
        total = self.session.line_count
        vp_size = self.calculate_viewport_size()
        self.v_scrollbar.setRange(0, max(0, total - vp_size))
        self.v_scrollbar.setPageStep(vp_size)
        self.v_scrollbar.setSingleStep(1)
        self.on_scrollbar_value_changed(self.v_scrollbar.value())

    def jump_to_line(self, line_index):
        vp_size = self.calculate_viewport_size()
        self.v_scrollbar.setValue(max(0, line_index - (vp_size // 2)))
        self.model.set_viewport(self.v_scrollbar.value(), vp_size)

        row = self.model.row_for_line(line_index)
        index = self.model.index(row, 0)
        if index.isValid():
            self.list_view.setCurrentIndex(index)
            self.list_view.scrollTo(index, QAbstractItemView.PositionAtCenter)

    def selected_line(self):
        idx = self.list_view.currentIndex()
        if not idx.isValid():
            return None
        return self.model.raw_index(idx.row())

    def eventFilter(self, obj, event):
        if obj == self.list_view and event.type() == QEvent.Resize:
            self.update_scrollbar_range()
            return False

        if obj == self.list_view and event.type() == QEvent.Wheel:
            steps = -event.angleDelta().y() // 40
            self.v_scrollbar.setValue(self.v_scrollbar.value() + steps)
            return True

        if obj == self.list_view and event.type() == QEvent.KeyPress:
            key = event.key()
            idx = self.list_view.currentIndex()
            row = idx.row() if idx.isValid() else -1

            if key == Qt.Key_Down and row >= self.model.rowCount() - 1:
                self.v_scrollbar.setValue(self.v_scrollbar.value() + 1)
                return True
            elif key == Qt.Key_Up and row <= 0:
                self.v_scrollbar.setValue(self.v_scrollbar.value() - 1)
                return True
            elif key == Qt.Key_PageDown:
                self.v_scrollbar.setValue(self.v_scrollbar.value() + self.v_scrollbar.pageStep())
                return True
            elif key == Qt.Key_PageUp:
                self.v_scrollbar.setValue(self.v_scrollbar.value() - self.v_scrollbar.pageStep())
                return True
            elif key in (Qt.Key_Return, Qt.Key_Enter) and self.session.navigator:
                backward = bool(event.modifiers() & Qt.ShiftModifier)
                self.search_controller.step_from_line(self.selected_line(), backward)
                return True

        return super().eventFilter(obj, event)

    def resizeEvent(self, event):
        self.update_scrollbar_range()
        super().resizeEvent(event)

    # --- Misc ---
    def show_context_menu(self, pos):
        menu = QMenu(self)
        copy_action = QAction("Copy", self)
        copy_action.triggered.connect(self.copy_selection)
        menu.addAction(copy_action)
        menu.exec(self.list_view.mapToGlobal(pos))

    def copy_selection(self):
        indexes = self.list_view.selectionModel().selectedIndexes()
        if not indexes: return
        indexes.sort(key=lambda x: x.row())
        text_lines = [self.model.data(index, Qt.DisplayRole) for index in indexes]
        text_lines = [line for line in text_lines if line is not None]
        if text_lines:
            QApplication.clipboard().setText("\n".join(text_lines))
            self.update_status_bar(f"Copied {len(text_lines)} lines")

    def on_editor_font_changed(self, family, size):
        font = QFont(family, size)
        font.setStyleHint(QFont.Monospace)
        self.list_view.setFont(font)
        self.update_scrollbar_range()

    def update_status_bar(self, message):
        self.last_status_message = message
        self.status_label.setText(message)

    def toggle_theme(self):
        self.is_dark_mode = not self.is_dark_mode
        self.config.theme = "Dark" if self.is_dark_mode else "Light"
        self.apply_theme()

    def apply_theme(self):
        self.model.set_theme_mode(self.is_dark_mode)
        self.delegate.set_theme_mode(self.is_dark_mode)

        if self.is_dark_mode:
            bg_color, fg_color, selection_bg, selection_fg = "#1e1e1e", "#d4d4d4", "#264f78", "#ffffff"
            menu_bg, menu_fg, menu_sel, hover_bg = "#252526", "#cccccc", "#094771", "#2a2d2e"
            bar_bg, bar_fg, input_bg, input_fg = "#007acc", "#ffffff", "#3c3c3c", "#cccccc"
            scrollbar_bg, scrollbar_handle, panel_bg = "#1e1e1e", "#424242", "#252526"
        else:
            bg_color, fg_color, selection_bg, selection_fg = "#ffffff", "#000000", "#add6ff", "#000000"
            menu_bg, menu_fg, menu_sel, hover_bg = "#f3f3f3", "#333333", "#0060c0", "#e8e8e8"
            bar_bg, bar_fg, input_bg, input_fg = "#007acc", "#ffffff", "#ffffff", "#000000"
            scrollbar_bg, scrollbar_handle, panel_bg = "#f3f3f3", "#c1c1c1", "#f3f3f3"

        self.list_view.viewport().update()

        style = f"""
        QMainWindow, QDialog {{ background-color: {bg_color}; color: {fg_color}; }}
        QWidget {{ color: {fg_color}; }}
        QMenuBar {{ background-color: {menu_bg}; color: {menu_fg}; }}
        QMenuBar::item:selected {{ background-color: {selection_bg}; color: {selection_fg}; }}
        QMenu {{ background-color: {menu_bg}; color: {menu_fg}; border: 1px solid #454545; }}
        QMenu::item:selected {{ background-color: {menu_sel}; color: #ffffff; }}
        QListView {{ background-color: {bg_color}; color: {fg_color}; border: none; outline: 0; }}
        QListView::item:selected {{ background-color: {selection_bg}; color: {selection_fg}; }}
        QStatusBar {{ background-color: {bar_bg}; color: {bar_fg}; }}
        QStatusBar QLabel {{ color: {bar_fg}; background-color: transparent; }}
        QScrollBar:vertical {{ border: none; background: {scrollbar_bg}; width: 14px; margin: 0px; }}
        QScrollBar::handle:vertical {{ background: {scrollbar_handle}; min-height: 20px; }}
        QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical {{ height: 0px; }}
        QDockWidget::title {{ background: {panel_bg}; padding-left: 5px; }}
        QTreeWidget {{ background-color: {panel_bg}; border: none; color: {fg_color}; }}
        QHeaderView::section {{ background-color: {menu_bg}; color: {fg_color}; border: none; padding: 2px; }}
        QLineEdit, QPlainTextEdit {{ background-color: {input_bg}; color: {input_fg}; border: 1px solid #555; }}
        #search_widget {{ background-color: {panel_bg}; }}
        QComboBox {{ background-color: {input_bg}; color: {input_fg}; border: 1px solid #555; padding: 2px; }}
        QToolButton {{ background-color: transparent; color: {input_fg}; border: none; font-weight: bold; padding: 2px 6px; }}
        QToolButton:hover {{ background-color: {hover_bg}; border-radius: 3px; }}
        QPushButton {{ background-color: {menu_bg}; color: {fg_color}; border: 1px solid #555; padding: 4px 12px; border-radius: 3px; }}
        QPushButton:hover {{ background-color: {hover_bg}; }}
        """
        app = QApplication.instance()
        if app:
            app.setStyleSheet(style)
