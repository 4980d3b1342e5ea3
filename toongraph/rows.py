"""Row codec: one indented, comma-separated record per line."""

from __future__ import annotations

from typing import Any, Collection, Dict, List, Mapping, Sequence

from .values import DELIMITER, QUOTE, decode_text, decode_value, encode_value

INDENT = "  "


def split_row(text: str) -> List[str]:
    """Split ``text`` on unquoted commas.

    Quotes are kept on the returned tokens so the value codec can tell a
    quoted cell from a bare one. Unbalanced quoting never raises; the rest of
    the line is simply treated as quoted.
    """

    tokens: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    while i < len(text):
        char = text[i]
        if char == QUOTE:
            if in_quotes and text[i + 1 : i + 2] == QUOTE:
                current.append(QUOTE * 2)
                i += 2
                continue
            in_quotes = not in_quotes
            current.append(char)
        elif char == DELIMITER and not in_quotes:
            tokens.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    tokens.append("".join(current).strip())
    return tokens


def strip_indent(line: str) -> str:
    if line.startswith(INDENT):
        return line[len(INDENT) :]
    return line


def encode_row(fields: Sequence[str], values: Mapping[str, Any]) -> str:
    return INDENT + DELIMITER.join(encode_value(values.get(field)) for field in fields)


def decode_row(
    line: str,
    fields: Sequence[str],
    text_fields: Collection[str] = (),
) -> Dict[str, Any]:
    """Zip the cells of ``line`` against ``fields``.

    Cells for ``text_fields`` are only unquoted; all others go through the
    full value decoding. Missing trailing cells decode to ``None`` and surplus
    cells are dropped.
    """

    tokens = split_row(strip_indent(line))
    row: Dict[str, Any] = {}
    for idx, field in enumerate(fields):
        token = tokens[idx] if idx < len(tokens) else ""
        if field in text_fields:
            row[field] = decode_text(token)
        else:
            row[field] = decode_value(token)
    return row


__all__ = ["INDENT", "decode_row", "encode_row", "split_row", "strip_indent"]
