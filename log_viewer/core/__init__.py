from .errors import LogViewerError, PatternError, InputTypeError
from .lines import split_lines
from .matcher import compile_pattern, find_spans, compute_matches, flatten_matches
from .navigation import MatchNavigator
from .extractor import (StructuredEntry, EntryCollection, extract_entries,
                        parse_entry, message_signature, FAILURE_KEYWORDS)
from .session import LogSession

__all__ = [
    "LogViewerError", "PatternError", "InputTypeError",
    "split_lines",
    "compile_pattern", "find_spans", "compute_matches", "flatten_matches",
    "MatchNavigator",
    "StructuredEntry", "EntryCollection", "extract_entries", "parse_entry",
    "message_signature", "FAILURE_KEYWORDS",
    "LogSession",
]
