from PySide6.QtCore import QObject, QSettings, Signal

ORGANIZATION = "LogViewer"
APPLICATION = "Log Viewer"
MAX_HISTORY = 10


def _to_bool(value):
    return str(value).lower() in ("1", "true", "yes", "y")


class ConfigManager(QObject):
    """
    Application settings stored with QSettings.
    Pass an explicit QSettings (e.g. an INI file) to keep tests isolated.
    """

    themeChanged = Signal(str)            # "Dark" or "Light"
    editorFontChanged = Signal(str, int)  # font_family, font_size
    searchOptionsChanged = Signal(bool, bool)  # case_sensitive, is_regex

    def __init__(self, settings=None):
        super().__init__()
        self.settings = settings if settings is not None else QSettings(ORGANIZATION, APPLICATION)

    def get(self, key, default=None):
        return self.settings.value(key, default)

    def set(self, key, value):
        self.settings.setValue(key, value)

    # 1. Appearance
    @property
    def theme(self):
        return self.settings.value("appearance/theme", "Dark")

    @theme.setter
    def theme(self, value):
        if self.theme != value:
            self.settings.setValue("appearance/theme", value)
            self.themeChanged.emit(value)

    @property
    def is_dark(self):
        return self.theme == "Dark"

    # 2. Log view
    @property
    def editor_font_family(self):
        return self.settings.value("editor/font_family", "Consolas")

    @property
    def editor_font_size(self):
        return int(self.settings.value("editor/font_size", 11))

    def set_editor_font(self, family, size):
        changed = False
        if self.editor_font_family != family:
            self.settings.setValue("editor/font_family", family)
            changed = True
        if self.editor_font_size != size:
            self.settings.setValue("editor/font_size", size)
            changed = True

        if changed:
            self.editorFontChanged.emit(family, size)

    # 3. Search
    @property
    def case_sensitive(self):
        return _to_bool(self.settings.value("search/case_sensitive", "false"))

    @property
    def is_regex(self):
        return _to_bool(self.settings.value("search/regex", "true"))

    def set_search_options(self, case_sensitive, is_regex):
        if self.case_sensitive == case_sensitive and self.is_regex == is_regex:
            return
        self.settings.setValue("search/case_sensitive", "true" if case_sensitive else "false")
        self.settings.setValue("search/regex", "true" if is_regex else "false")
        self.searchOptionsChanged.emit(case_sensitive, is_regex)

    @property
    def debounce_ms(self):
        return int(self.settings.value("search/debounce_ms", 250))

    @debounce_ms.setter
    def debounce_ms(self, value):
        self.settings.setValue("search/debounce_ms", int(value))

    @property
    def search_history(self):
        history = self.settings.value("search/history", [])
        if isinstance(history, str):
            history = [history]
        return [str(h) for h in (history or []) if h]

    def add_search_history(self, query):
        if not query:
            return
        history = self.search_history
        if query in history:
            history.remove(query)
        history.insert(0, query)
        self.settings.setValue("search/history", history[:MAX_HISTORY])

    # 4. General
    @property
    def default_encoding(self):
        return self.settings.value("general/default_encoding", "UTF-8")

    @default_encoding.setter
    def default_encoding(self, value):
        self.settings.setValue("general/default_encoding", value)

    @property
    def last_dir(self):
        return self.settings.value("general/last_dir", "")

    @last_dir.setter
    def last_dir(self, value):
        self.settings.setValue("general/last_dir", value)


# Global instance
_config_instance = None

def get_config():
    global _config_instance
    if _config_instance is None:
        _config_instance = ConfigManager()
    return _config_instance
