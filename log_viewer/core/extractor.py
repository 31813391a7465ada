import json
import logging

from .errors import InputTypeError

logger = logging.getLogger(__name__)

# Substrings that flag a DEBUG entry as worth showing.
FAILURE_KEYWORDS = (
    "error", "Error", "ERROR",
    "fail", "Fail", "FAIL",
    "failed", "Failed", "FAILED",
    "failure", "Failure", "FAILURE",
)

ERROR_LEVEL = "ERROR"
DEBUG_LEVEL = "DEBUG"


def message_signature(message):
    """First three whitespace-delimited words of message, used as dedup key."""
    return " ".join(message.split()[:3])


class StructuredEntry:
    def __init__(self, level, message, data, line=None):
        self.level = level
        self.message = message
        self.data = data
        self.line = line
        self.signature = message_signature(message)
        self.pretty = json.dumps(data, indent=2, ensure_ascii=False)

    def __eq__(self, other):
        if not isinstance(other, StructuredEntry):
            return NotImplemented
        return (self.level, self.message, self.data, self.line) == \
               (other.level, other.message, other.data, other.line)

    def __repr__(self):
        return f"StructuredEntry(level={self.level!r}, line={self.line}, signature={self.signature!r})"


class EntryCollection:
    """Signature -> first entry seen with it. Iterates in first-seen order."""

    def __init__(self):
        self._entries = {}

    def add(self, entry):
        if entry.signature in self._entries:
            return False
        self._entries[entry.signature] = entry
        return True

    def merge(self, other):
        """Adds the entries of a later batch, keeping first-seen-wins."""
        for entry in other:
            self.add(entry)
        return self

    def get(self, signature, default=None):
        return self._entries.get(signature, default)

    def entries(self):
        return list(self._entries.values())

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self):
        return len(self._entries)

    def __contains__(self, signature):
        return signature in self._entries


_decoder = json.JSONDecoder()


def _find_json_object(line):
    # Trailing {...} block: try each opening brace up to the last closing one.
    end = line.rfind("}")
    if end == -1:
        return None
    candidate = line[:end + 1]
    start = candidate.find("{")
    while start != -1:
        try:
            obj, obj_end = _decoder.raw_decode(candidate, start)
        except (ValueError, RecursionError):
            obj, obj_end = None, -1
        if isinstance(obj, dict) and obj_end == len(candidate):
            return obj
        start = candidate.find("{", start + 1)
    return None


def parse_entry(line, line_index=None):
    """
    Parses one log line into a StructuredEntry, or returns None when the line
    carries no usable JSON entry. Never raises for malformed content.
    """
    obj = _find_json_object(line)
    if obj is None:
        return None

    nested = obj.get("log")
    if isinstance(nested, str):
        try:
            obj = json.loads(nested)
        except (ValueError, RecursionError):
            logger.debug("Line %s: nested 'log' field is not JSON", line_index)
            return None
        if not isinstance(obj, dict):
            logger.debug("Line %s: nested 'log' field is not an object", line_index)
            return None

    message = obj.get("message")
    if not isinstance(message, str):
        logger.debug("Line %s: no message field", line_index)
        return None

    try:
        return StructuredEntry(obj.get("level"), message, obj, line_index)
    except RecursionError:
        logger.debug("Line %s: entry nested too deeply to serialise", line_index)
        return None


def extract_entries(lines, start_line=0, keywords=FAILURE_KEYWORDS):
    """
    Scans lines for JSON log entries and returns (errors, debug):

      errors: every ERROR entry, deduplicated by signature
      debug:  DEBUG entries whose message contains a failure keyword,
              deduplicated the same way

    start_line offsets the recorded line numbers for batch processing; merge
    the collections of consecutive batches to get the result for the whole
    text.
    """
    if isinstance(lines, str) or not isinstance(lines, (list, tuple)):
        raise InputTypeError("lines", "a list of str", lines)

    errors = EntryCollection()
    debug = EntryCollection()

    for offset, line in enumerate(lines):
        if not isinstance(line, str) or "{" not in line:
            continue
        entry = parse_entry(line, start_line + offset)
        if entry is None:
            continue

        if entry.level == ERROR_LEVEL:
            errors.add(entry)
        elif entry.level == DEBUG_LEVEL:
            if any(k in entry.message for k in keywords):
                debug.add(entry)

    logger.debug("Extracted %d error and %d debug entries", len(errors), len(debug))
    return errors, debug
