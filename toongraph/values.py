"""Scalar <-> token conversion for the compact notation.

A token is one comma-separated cell of a row. Strings that carry a delimiter,
a double quote or a newline are wrapped in double quotes with inner quotes
doubled; everything else is written bare.

Decoding is deliberately loose: ``true``/``false`` become booleans, an empty
token is absent, and anything that reads as a decimal number becomes one. A
string such as ``"007"`` that was meant to stay text cannot be told apart
from the number 7 once written bare, so typed positions coerce it.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Optional, Union

Scalar = Union[str, int, float, bool, None]

QUOTE = '"'
DELIMITER = ","
_NEEDS_QUOTING = (DELIMITER, QUOTE, "\n")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def quote_text(text: str) -> str:
    """Always quote ``text``, doubling any inner quotes."""
    return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE


def escape_text(text: str) -> str:
    """Quote ``text`` when it contains a comma, a quote or a newline."""
    if any(marker in text for marker in _NEEDS_QUOTING):
        return quote_text(text)
    return text


def encode_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, str):
        return escape_text(value)
    if isinstance(value, (dict, list, tuple)):
        return escape_text(json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    return escape_text(str(value))


def is_quoted(token: str) -> bool:
    return len(token) >= 2 and token.startswith(QUOTE) and token.endswith(QUOTE)


def unquote(token: str) -> str:
    """Strip one layer of outer quotes and collapse doubled quotes."""
    if is_quoted(token):
        return token[1:-1].replace(QUOTE * 2, QUOTE)
    return token


def parse_number(token: str) -> Optional[Union[int, float]]:
    if not _NUMBER_RE.match(token):
        return None
    if any(ch in token for ch in ".eE"):
        return float(token)
    return int(token)


def decode_text(token: str) -> Optional[str]:
    """Decode a token that is always text (ids, labels, enum values)."""
    if token == "":
        return None
    return unquote(token)


def decode_value(token: str) -> Scalar:
    if token == "true":
        return True
    if token == "false":
        return False
    if token == "":
        return None
    number = parse_number(token)
    if number is not None:
        return number
    return unquote(token)


__all__ = [
    "Scalar",
    "decode_text",
    "decode_value",
    "encode_value",
    "escape_text",
    "is_quoted",
    "parse_number",
    "quote_text",
    "unquote",
]
