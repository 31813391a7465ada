from PySide6.QtWidgets import QStyledItemDelegate, QStyle
from PySide6.QtGui import QPalette, QColor
from PySide6.QtCore import QSize, QRectF, Qt

from .models import RawIndexRole, SpansRole, FocusSpanRole


class LogDelegate(QStyledItemDelegate):
    """Paints one log line with a fixed line-number column and match highlights."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.hover_color = QColor("#2a2d2e")
        self.match_color = QColor("#653306")
        self.match_text_color = QColor("#ffffff")
        self.focus_match_color = QColor("#d7ba7d")
        self.focus_match_text_color = QColor("#000000")
        self.max_line_number = 1000

    def set_hover_color(self, color):
        self.hover_color = QColor(color)

    def set_max_line_number(self, count):
        self.max_line_number = count

    def set_theme_mode(self, is_dark):
        if is_dark:
            self.hover_color = QColor("#2a2d2e")
            self.match_color = QColor("#653306")
            self.match_text_color = QColor("#ffffff")
        else:
            self.hover_color = QColor("#e8e8e8")
            self.match_color = QColor("#fff176")
            self.match_text_color = QColor("#000000")

    def _line_number_width(self, option):
        digits = len(str(self.max_line_number))
        char_w = option.fontMetrics.horizontalAdvance('8')
        return max(40, digits * char_w + 15)

    def paint(self, painter, option, index):
        painter.save()
        try:
            # Keep line numbers fixed while scrolling horizontally
            scroll_x = option.widget.horizontalScrollBar().value() if option.widget else 0

            # 1. Background
            bg_color = None
            state = option.state

            if state & QStyle.State_Selected:
                bg_color = option.palette.highlight()
            elif state & QStyle.State_MouseOver:
                bg_color = self.hover_color
            else:
                model_bg = index.data(Qt.BackgroundRole)
                if model_bg and isinstance(model_bg, QColor):
                    bg_color = model_bg

            if bg_color:
                painter.fillRect(option.rect, bg_color)

            # 2. Line number column
            raw_index = index.data(RawIndexRole)
            line_num_width = self._line_number_width(option)
            line_bg_rect = QRectF(option.rect.left() + scroll_x, option.rect.top(), line_num_width, option.rect.height())

            if raw_index is not None:
                base_col = option.palette.color(QPalette.Base)
                if base_col.lightness() > 128:
                    num_bg = QColor(240, 240, 240)
                    num_fg = QColor(128, 128, 128)
                else:
                    num_bg = QColor(40, 40, 40)
                    num_fg = QColor(100, 100, 100)

                painter.fillRect(line_bg_rect, num_bg)
                painter.save()
                painter.setPen(num_fg)
                painter.drawText(line_bg_rect.adjusted(0, 0, -5, 0), Qt.AlignRight, str(raw_index + 1))
                painter.restore()

            # 3. Text
            text = index.data(Qt.DisplayRole)
            if text:
                if state & QStyle.State_Selected:
                    painter.setPen(option.palette.highlightedText().color())
                else:
                    painter.setPen(option.palette.text().color())

                text_rect = option.rect.adjusted(line_num_width + 8, 0, -4, 0)
                painter.setClipRect(option.rect.adjusted(line_num_width + scroll_x, 0, 0, 0))

                spans = index.data(SpansRole)
                if spans:
                    self._paint_highlighted_text(painter, text_rect, text, spans, index.data(FocusSpanRole), option)
                else:
                    painter.drawText(text_rect, Qt.AlignLeft, text)
        finally:
            painter.restore()

    def _paint_highlighted_text(self, painter, rect, text, spans, focus_span, option):
        x = rect.left()
        y = rect.top() + option.fontMetrics.ascent()
        base_pen = painter.pen()
        pos = 0

        for start, end in spans:
            pre_text = text[pos:start]
            if pre_text:
                painter.setPen(base_pen)
                painter.drawText(x, y, pre_text)
                x += option.fontMetrics.horizontalAdvance(pre_text)

            match_text = text[start:end]
            match_width = option.fontMetrics.horizontalAdvance(match_text)
            if focus_span is not None and focus_span == (start, end):
                bg, fg = self.focus_match_color, self.focus_match_text_color
            else:
                bg, fg = self.match_color, self.match_text_color

            painter.fillRect(QRectF(x, rect.top(), match_width, rect.height()), bg)
            painter.setPen(fg)
            painter.drawText(x, y, match_text)
            x += match_width
            pos = end

        remaining = text[pos:]
        if remaining:
            painter.setPen(base_pen)
            painter.drawText(x, y, remaining)

    def sizeHint(self, option, index):
        text = index.data(Qt.DisplayRole)
        if not text:
            return QSize(option.rect.width(), option.fontMetrics.height())

        text_width = option.fontMetrics.horizontalAdvance(text)
        return QSize(self._line_number_width(option) + 8 + text_width + 20, option.fontMetrics.height())
