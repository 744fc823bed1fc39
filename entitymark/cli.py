#!/usr/bin/env python3
"""Command-line access to the mention engine for saved documents.

Usage:
  entitymark scan --catalog entities.json --document chapter.json [--output annotated.json]
  entitymark occurrences --document annotated.json --entity-id e-watson

The catalog file is a JSON list of entity records (``id``, ``name``, ``type``
and ``aliases`` or ``attributes.aliases``). Documents use the editor's JSON
format (``{"type": "doc", "content": [...]}``).
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from entitymark.config import load_engine_config
from entitymark.document.memory import InMemoryDocument
from entitymark.engine import MentionEngine
from entitymark.entity import StoryEntity


def _read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_catalog(path: Path) -> list[StoryEntity]:
    records = _read_json(path)
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected a JSON list of entities")
    return [StoryEntity.from_record(record) for record in records]


def _cmd_scan(args: argparse.Namespace) -> int:
    config = load_engine_config(args.config)
    catalog = load_catalog(args.catalog)
    document = InMemoryDocument.from_json(_read_json(args.document))
    engine = MentionEngine(document=document, config=config)

    spans = asyncio.run(engine.scan_and_sync(catalog))
    print(json.dumps([span.model_dump(mode="json") for span in spans], indent=2, ensure_ascii=False))

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(document.to_json(), f, indent=2, ensure_ascii=False)
        print(f"Wrote annotated document to {args.output}", file=sys.stderr)
    return 0


def _cmd_occurrences(args: argparse.Namespace) -> int:
    config = load_engine_config(args.config)
    document = InMemoryDocument.from_json(_read_json(args.document))
    engine = MentionEngine(document=document, config=config)
    occurrences = engine.find_occurrences(args.entity_id)
    print(json.dumps([o.model_dump() for o in occurrences], indent=2, ensure_ascii=False))
    return 0 if occurrences else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="entitymark",
        description="Annotate and query entity mentions in editor documents.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to entitymark.toml (default: $ENTITYMARK_CONFIG or ./entitymark.toml)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    scan = commands.add_parser("scan", help="Scan a document and write entity marks")
    scan.add_argument("--catalog", type=Path, required=True, help="JSON list of entity records")
    scan.add_argument("--document", type=Path, required=True, help="Document JSON to scan")
    scan.add_argument("--output", type=Path, default=None, help="Where to write the annotated document")
    scan.set_defaults(handler=_cmd_scan)

    occurrences = commands.add_parser("occurrences", help="List marked occurrences of one entity")
    occurrences.add_argument("--document", type=Path, required=True, help="Annotated document JSON")
    occurrences.add_argument("--entity-id", required=True, help="Entity id to look up")
    occurrences.set_defaults(handler=_cmd_occurrences)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except (OSError, ValueError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
