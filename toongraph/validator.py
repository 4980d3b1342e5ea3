"""Structural validation of graph documents."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from .schemas import Document
from .utils import logger

# pydantic error types -> JSON Schema keywords
KEYWORDS = {
    "missing": "required",
    "literal_error": "enum",
    "string_too_short": "minLength",
    "too_short": "minItems",
    "string_type": "type",
    "bool_type": "type",
    "dict_type": "type",
    "list_type": "type",
    "model_type": "type",
    "model_attributes_type": "type",
}


@dataclass
class ValidationIssue:
    path: str
    message: str
    keyword: Optional[str] = None


@dataclass
class ValidationResult:
    valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(valid=True, errors=[])

    @classmethod
    def failure(cls, errors: List[ValidationIssue]) -> "ValidationResult":
        return cls(valid=False, errors=errors)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": [asdict(error) for error in self.errors]}


def json_pointer(loc: Sequence[Union[str, int]]) -> str:
    if not loc:
        return "/"
    return "/" + "/".join(str(part).replace("~", "~0").replace("/", "~1") for part in loc)


@lru_cache(maxsize=None)
def document_adapter() -> TypeAdapter:
    """Shared schema validator, built on first use."""
    logger.debug("Building graph document schema")
    return TypeAdapter(Document)


class DocumentValidator:
    """Checks documents against the graph document schema.

    Every violation is collected rather than stopping at the first one, so a
    document with a bad graph type and no ``nodes`` reports both problems.
    """

    def __init__(self, adapter: Optional[TypeAdapter] = None) -> None:
        self.adapter = adapter or document_adapter()

    def validate(self, document: Any) -> ValidationResult:
        if not isinstance(document, Mapping):
            return ValidationResult.failure([ValidationIssue("/", "must be object", "type")])

        issues: List[ValidationIssue] = []
        if ("graph" in document) == ("graphs" in document):
            issues.append(
                ValidationIssue("/", 'must have exactly one of "graph" or "graphs"', "oneOf")
            )
        try:
            self.adapter.validate_python(dict(document))
        except ValidationError as exc:
            for error in exc.errors(include_url=False):
                issues.append(
                    ValidationIssue(
                        path=json_pointer(error["loc"]),
                        message=error["msg"],
                        keyword=KEYWORDS.get(error["type"], error["type"]),
                    )
                )
        if issues:
            return ValidationResult.failure(issues)
        return ValidationResult.success()

    def json_schema(self) -> Dict[str, Any]:
        return self.adapter.json_schema()


@lru_cache(maxsize=None)
def default_validator() -> DocumentValidator:
    return DocumentValidator()


def validate(document: Any, validator: Optional[DocumentValidator] = None) -> ValidationResult:
    return (validator or default_validator()).validate(document)


def first_graph(document: Mapping[str, Any]) -> Tuple[str, Optional[Mapping[str, Any]]]:
    """Return the JSON pointer and value of the document's first graph."""
    if document.get("graph") is not None:
        return "/graph", document["graph"]
    graphs = document.get("graphs") or []
    if graphs:
        return "/graphs/0", graphs[0]
    return "/graph", None


def validate_graph_type(
    document: Any,
    expected: str,
    validator: Optional[DocumentValidator] = None,
) -> ValidationResult:
    """Validate ``document`` and require its first graph to be ``expected``."""
    result = validate(document, validator)
    if not result.valid:
        return result
    path, graph = first_graph(document)
    if graph is None or graph.get("type") != expected:
        return ValidationResult.failure(
            [ValidationIssue(f"{path}/type", f'Expected graph type "{expected}"', "const")]
        )
    return result


def validate_class(document: Any) -> ValidationResult:
    return validate_graph_type(document, "class")


def validate_instance(document: Any) -> ValidationResult:
    return validate_graph_type(document, "instance")


def validate_process(document: Any) -> ValidationResult:
    return validate_graph_type(document, "process")


def validate_workflow(document: Any) -> ValidationResult:
    return validate_graph_type(document, "workflow")


def dangling_edges(graph: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    """Edges whose source or target is not a key of ``graph["nodes"]``.

    Schema validation does not check this; callers decide whether it matters.
    """

    nodes = graph.get("nodes") or {}
    edges: Iterable[Mapping[str, Any]] = graph.get("edges") or []
    return [edge for edge in edges if edge.get("source") not in nodes or edge.get("target") not in nodes]


def format_issues(result: ValidationResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


__all__ = [
    "DocumentValidator",
    "KEYWORDS",
    "ValidationIssue",
    "ValidationResult",
    "dangling_edges",
    "default_validator",
    "document_adapter",
    "first_graph",
    "json_pointer",
    "validate",
    "validate_class",
    "validate_graph_type",
    "validate_instance",
    "validate_process",
    "validate_workflow",
]
