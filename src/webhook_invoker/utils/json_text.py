import re
import logging
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

# Applied in this order; backslash must come first.
_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
    ("\b", "\\b"),
    ("\f", "\\f"),
)

_UNESCAPES = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
}

_ESCAPE_SEQUENCE = re.compile(r'\\(["\\nrtbf])')


def escape_json_string(value: Optional[str]) -> str:
    """
    Escapes a string for embedding inside a JSON string literal.

    Only backslash, double quote, newline, carriage return, tab, backspace and
    form feed are escaped. Other control characters and non-ASCII text are
    left untouched.
    """
    if value is None:
        return ""
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def unescape_json_string(value: Optional[str]) -> str:
    """
    Reverses escape_json_string.

    The sequences are resolved in a single left-to-right pass so that an
    escaped backslash followed by a letter (e.g. ``\\\\n``) is not turned into a
    control character. Unknown escape sequences are kept as-is.
    """
    if value is None:
        return ""
    return _ESCAPE_SEQUENCE.sub(lambda match: _UNESCAPES[match.group(1)], value)


def find_json_string_end(text: str, start: int) -> int:
    """
    Finds the index of the quote that closes the string value beginning at `start`.

    A quote preceded by an even number of contiguous backslashes (zero included)
    terminates the string; an odd number means the quote itself is escaped.

    Returns:
        The index of the closing quote, or -1 if the string is never closed.
    """
    i = start
    while i < len(text):
        if text[i] == '"':
            backslash_count = 0
            j = i - 1
            while j >= start and text[j] == "\\":
                backslash_count += 1
                j -= 1
            if backslash_count % 2 == 0:
                return i
        i += 1
    return -1


def _key_pattern(key: str) -> re.Pattern:
    return re.compile('"' + re.escape(key) + r'"\s*:\s*"')


def extract_json_value(text: str, key: str) -> Optional[str]:
    """
    Returns the raw (still escaped) string value of the first `"key":"..."` in `text`.

    This is a textual scan, not a parse: nesting is ignored and only string
    values are recognised. Returns None when the key is absent or its value is
    not terminated.
    """
    if not text:
        return None
    match = _key_pattern(key).search(text)
    if not match:
        return None
    start = match.end()
    end = find_json_string_end(text, start)
    if end == -1:
        return None
    return text[start:end]


def extract_all_json_values(text: str, key: str) -> Iterator[str]:
    """Yields the raw string value of every `"key":"..."` occurrence, in document order."""
    if not text:
        return
    for match in _key_pattern(key).finditer(text):
        start = match.end()
        end = find_json_string_end(text, start)
        if end == -1:
            logger.debug(f"Unterminated value for key '{key}' at offset {start}; stopping scan.")
            return
        yield text[start:end]


def looks_like_json(payload: Optional[str]) -> bool:
    """True when the payload's first non-whitespace character opens an object or array."""
    if not payload:
        return False
    return payload.lstrip().startswith(("{", "["))


def wrap_message(payload: Optional[str]) -> str:
    """Wraps plain text as a single-field `{"message": "..."}` JSON object."""
    return '{"message": "' + escape_json_string(payload) + '"}'
