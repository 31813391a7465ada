import logging

from .errors import InputTypeError

logger = logging.getLogger(__name__)


def split_lines(text):
    """
    Splits raw log text into lines on '\\n'.

    Nothing is trimmed or collapsed, so "\\n".join(split_lines(text)) == text
    and the result always has text.count("\\n") + 1 entries.
    """
    if not isinstance(text, str):
        raise InputTypeError("text", "a str", text)
    lines = text.split("\n")
    logger.debug("Split %d chars into %d lines", len(text), len(lines))
    return lines
