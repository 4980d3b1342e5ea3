"""Format detection and conversion between JSON and compact notation.

Graph documents go through :mod:`toongraph.converter`. Any other JSON payload
is encoded with the general-purpose ``toon_format`` library, and compact text
without a ``graph{...}:`` header is decoded with it when it can be.
"""

from __future__ import annotations

import json
import os
import re
from typing import Any, Mapping, Optional, Tuple

import toon_format

from .converter import decode, encode
from .sections import SectionKind, match_header
from .utils import logger
from .validator import DocumentValidator, ValidationResult, validate

JSON = "json"
TOON = "toon"
FORMATS = (JSON, TOON)

# `[N]:`, `[N]{a,b}:` or `[N|]: ...` opening a top-level array in compact text.
_ROOT_ARRAY_RE = re.compile(r"^\[\d+[^\]]*\](?:\{[^}]*\})?:")


class DocumentInvalid(ValueError):
    """Raised when a JSON graph document fails schema validation."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        details = "; ".join(f"{issue.path}: {issue.message}" for issue in result.errors)
        super().__init__(f"Invalid graph document: {details}")


def detect_format(text: str, filename: Optional[str] = None) -> str:
    """JSON when the file ends in ``.json`` or the text opens an object/array.

    A compact root-array header such as ``[2]: 1,2`` is not JSON.
    """
    if filename and os.path.splitext(filename)[1].lower() == ".json":
        return JSON
    stripped = text.lstrip()
    if _ROOT_ARRAY_RE.match(stripped):
        return TOON
    if stripped.startswith("{") or stripped.startswith("["):
        return JSON
    return TOON


def is_graph_document(obj: Any) -> bool:
    return isinstance(obj, Mapping) and ("graph" in obj or "graphs" in obj)


def has_graph_header(text: str) -> bool:
    for line in text.split("\n"):
        header = match_header(line.rstrip())
        if header is not None and header.kind is SectionKind.GRAPH:
            return True
    return False


def decode_generic(text: str) -> Tuple[Any, bool]:
    """Decode compact text that may not be a graph document.

    Returns the value and whether it is a graph. Text with a graph header is
    always read as a graph; anything else is tried with ``toon_format`` first
    and falls back to the graph decoder when the library rejects it.
    """

    if has_graph_header(text):
        return decode(text), True
    try:
        return toon_format.decode(text), False
    except Exception as exc:
        logger.debug("Generic decode failed (%s); reading as a graph document", exc)
    return decode(text), True


def parse_document(text: str, filename: Optional[str] = None) -> Tuple[Any, str]:
    """Parse ``text`` in whichever format it is in.

    Malformed JSON raises :class:`json.JSONDecodeError`; compact notation
    always decodes as a graph document.
    """

    fmt = detect_format(text, filename)
    if fmt == JSON:
        return json.loads(text), fmt
    return decode(text), fmt


def load_document(path: str) -> Tuple[Any, str]:
    with open(path, "r", encoding="utf-8") as fh:
        text = fh.read()
    return parse_document(text, path)


def dump_json(document: Any) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


def convert(
    text: str,
    filename: Optional[str] = None,
    target: Optional[str] = None,
    validator: Optional[DocumentValidator] = None,
) -> Tuple[str, str]:
    """Convert ``text`` to the other format, or to ``target`` when given.

    JSON graph documents are validated before they are encoded; other JSON
    payloads are encoded as-is. Returns the output text and its format.
    """

    if target is not None and target not in FORMATS:
        raise ValueError(f"Unknown target format {target!r}; expected one of {FORMATS}")
    fmt = detect_format(text, filename)
    if fmt == JSON:
        document = json.loads(text)
        if not is_graph_document(document):
            if target == JSON:
                return dump_json(document), JSON
            logger.debug("Encoding generic JSON payload to compact notation")
            return toon_format.encode(document), TOON
        result = validate(document, validator)
        if not result.valid:
            raise DocumentInvalid(result)
        if target == JSON:
            return dump_json(document), JSON
        logger.debug("Encoding JSON graph document to compact notation")
        return encode(document), TOON
    document, is_graph = decode_generic(text)
    if target == TOON:
        return (encode(document) if is_graph else toon_format.encode(document)), TOON
    logger.debug("Decoded compact notation to JSON (%s)", "graph" if is_graph else "generic")
    return dump_json(document), JSON


__all__ = [
    "DocumentInvalid",
    "FORMATS",
    "JSON",
    "TOON",
    "convert",
    "decode_generic",
    "detect_format",
    "dump_json",
    "has_graph_header",
    "is_graph_document",
    "load_document",
    "parse_document",
]
