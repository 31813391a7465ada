import re
import logging

from .errors import PatternError, InputTypeError

logger = logging.getLogger(__name__)


def compile_pattern(pattern, case_sensitive=False, is_regex=True):
    """
    Compiles a search pattern. Returns None for an empty pattern, which means
    "no highlighting" rather than "match everything".

    Raises PatternError when the pattern is not a valid regular expression.
    A literal search only happens when the caller asks for it with
    is_regex=False.
    """
    if not isinstance(pattern, str):
        raise InputTypeError("pattern", "a str", pattern)
    if not pattern:
        return None

    source = pattern if is_regex else re.escape(pattern)
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise PatternError(pattern, e.msg, e.pos) from e


def find_spans(line, regex):
    """
    Returns the non-overlapping (start, end) spans of regex in line, scanning
    left to right. Scanning resumes at the end of each match, or one character
    further for a zero-length match. Zero-length matches produce no span.
    """
    spans = []
    pos = 0
    length = len(line)
    while pos <= length:
        m = regex.search(line, pos)
        if m is None:
            break
        start, end = m.span()
        if end == start:
            pos = end + 1
            continue
        spans.append((start, end))
        pos = end
    return spans


def compute_matches(lines, pattern, case_sensitive=False, is_regex=True, start_line=0):
    """
    Runs pattern against every line independently.

    Returns (line_matches, flat_matches):
      line_matches: {line_index: [(start, end), ...]} for lines with a match
      flat_matches: [(line_index, (start, end)), ...] ordered by line, then start

    A single trailing "\\r" (CRLF text) is not searched.

    start_line is added to every reported index so a large text can be
    processed one batch of lines at a time and the results concatenated.
    """
    if isinstance(lines, str) or not isinstance(lines, (list, tuple)):
        raise InputTypeError("lines", "a list of str", lines)

    regex = compile_pattern(pattern, case_sensitive, is_regex)
    line_matches = {}
    flat_matches = []
    if regex is None:
        return line_matches, flat_matches

    for offset, line in enumerate(lines):
        if not isinstance(line, str):
            raise InputTypeError(f"lines[{offset}]", "a str", line)
        # A CRLF line keeps its "\r"; match as if it ended at the break so "$" works.
        spans = find_spans(line[:-1] if line.endswith("\r") else line, regex)
        if not spans:
            continue
        idx = start_line + offset
        line_matches[idx] = spans
        flat_matches.extend((idx, span) for span in spans)

    logger.debug("Pattern %r: %d matches on %d lines", pattern, len(flat_matches), len(line_matches))
    return line_matches, flat_matches


def flatten_matches(line_matches):
    """Rebuilds the globally ordered match sequence from a line -> spans mapping."""
    flat = []
    for idx in sorted(line_matches):
        flat.extend((idx, span) for span in line_matches[idx])
    return flat
