"""Command line interface for toongraph."""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Mapping, Optional, Sequence

from rich.markup import escape

from .bridge import FORMATS, DocumentInvalid, convert, load_document
from .export import export_graph, to_dot, write_graphml
from .schemas import GRAPH_TYPES
from .utils import console, default_log_level, err_console, logger, set_log_level
from .validator import (
    ValidationResult,
    dangling_edges,
    default_validator,
    first_graph,
    format_issues,
    validate,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toongraph",
        description="Convert, validate and visualize graph documents in compact notation",
    )
    parser.add_argument(
        "--log-level",
        default=default_log_level(),
        help="Python logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", aliases=["gen"], help="Convert JSON to compact notation or back")
    generate.add_argument("file", help="Input file (.json or compact notation)")
    generate.add_argument("-o", "--output", help="Output file (default: stdout)")
    generate.add_argument("-f", "--format", choices=FORMATS, help="Force the output format")

    validate_cmd = sub.add_parser("validate", aliases=["val"], help="Validate a graph document")
    validate_cmd.add_argument("file", help="Input file (.json or compact notation)")
    validate_cmd.add_argument("-t", "--type", choices=GRAPH_TYPES, help="Expected graph type")
    validate_cmd.add_argument("--json", action="store_true", help="Print the result as JSON")

    visualize = sub.add_parser("visualize", aliases=["viz"], help="Export the first graph for visualization")
    visualize.add_argument("file", help="Input file (.json or compact notation)")
    visualize.add_argument("-o", "--output", help="Output file (default: stdout, DOT only)")
    visualize.add_argument("-f", "--format", choices=("dot", "graphml"), default="dot")
    visualize.add_argument("--out-dir", help="Write DOT, GraphML, nodes.json and edges.json to this directory")

    sub.add_parser("schema", help="Print the JSON Schema of graph documents")

    return parser


def _read(path: str) -> Any:
    if not os.path.exists(path):
        raise SystemExit(f"File not found: {path}")
    try:
        document, _ = load_document(path)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON in {path}: {exc}") from exc
    return document


def _write(text: str, output: Optional[str]) -> None:
    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
        console.log(f"Generated {escape(output)}")
    else:
        sys.stdout.write(text + "\n")


def _report_errors(result: ValidationResult) -> None:
    for issue in result.errors:
        err_console.print(f"  {escape(issue.path)}: {escape(issue.message)}")


def run_generate(args: argparse.Namespace) -> None:
    if not os.path.exists(args.file):
        raise SystemExit(f"File not found: {args.file}")
    with open(args.file, "r", encoding="utf-8") as fh:
        text = fh.read()
    try:
        output, fmt = convert(text, filename=args.file, target=args.format)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON in {args.file}: {exc}") from exc
    except DocumentInvalid as exc:
        err_console.print("[red]Validation errors:[/red]")
        _report_errors(exc.result)
        raise SystemExit(1) from exc
    logger.debug("Converted %s to %s", args.file, fmt)
    _write(output, args.output)


def _graph_summary(document: Mapping[str, Any]) -> Mapping[str, Any]:
    _, graph = first_graph(document)
    return graph or {}


def run_validate(args: argparse.Namespace) -> None:
    document = _read(args.file)
    result = validate(document)
    if args.json:
        sys.stdout.write(format_issues(result) + "\n")
        if not result.valid:
            raise SystemExit(1)
        return
    if not result.valid:
        err_console.print("[red]Invalid graph document[/red]")
        _report_errors(result)
        raise SystemExit(1)

    graph = _graph_summary(document)
    console.log("[green]Valid graph document[/green]")
    console.log(
        {
            "type": graph.get("type"),
            "nodes": len(graph.get("nodes") or {}),
            "edges": len(graph.get("edges") or []),
        }
    )
    if args.type and graph.get("type") != args.type:
        console.log(f'[yellow]Expected type "{args.type}" but found "{escape(str(graph.get("type")))}"[/yellow]')
    missing = dangling_edges(graph)
    if missing:
        console.log(f"[yellow]{len(missing)} edge(s) reference missing nodes[/yellow]", missing[:3])


def run_visualize(args: argparse.Namespace) -> None:
    document = _read(args.file)
    result = validate(document)
    if not result.valid:
        err_console.print("[red]Invalid graph document[/red]")
        _report_errors(result)
        raise SystemExit(1)
    graph = _graph_summary(document)
    if args.out_dir:
        paths = export_graph(graph, args.out_dir)
        console.log(paths)
        return
    if args.format == "graphml":
        if not args.output:
            raise SystemExit("GraphML export needs --output")
        write_graphml(graph, args.output)
        console.log(f"Generated {escape(args.output)}")
        return
    _write(to_dot(graph), args.output)


def run_schema(args: argparse.Namespace) -> None:
    sys.stdout.write(json.dumps(default_validator().json_schema(), indent=2) + "\n")


COMMANDS = {
    "generate": run_generate,
    "gen": run_generate,
    "validate": run_validate,
    "val": run_validate,
    "visualize": run_visualize,
    "viz": run_visualize,
    "schema": run_schema,
}


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_log_level(args.log_level)
    handler = COMMANDS.get(args.command)
    if handler is None:  # pragma: no cover - defensive
        parser.print_help()
        return
    handler(args)


if __name__ == "__main__":  # pragma: no cover
    main()
