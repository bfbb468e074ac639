"""Run a selection through Context Bridge from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from context_bridge.catalog import JsonFileCatalog, find_duplicates
from context_bridge.config import PipelineConfig
from context_bridge.display import render_text
from context_bridge.models import SelectionEvent
from context_bridge.pipeline import ContextBridge
from context_bridge.state_machine import ContextBridgeStateMachine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Context Bridge selection lookup")
    parser.add_argument(
        "text",
        nargs="?",
        help="Selected text; read from stdin when omitted",
    )
    parser.add_argument("--file", default="untitled", help="File the selection belongs to")
    parser.add_argument("--language", default="plaintext", help="Language id of the file")
    parser.add_argument("--line", type=int, default=1, help="1-based line of the selection")
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Context catalog JSON (defaults to CONTEXT_BRIDGE_CATALOG_PATH or data/contextDatabase.json)",
    )
    parser.add_argument("--json", action="store_true", help="Print the context map as JSON")
    parser.add_argument(
        "--check-duplicates",
        action="store_true",
        help="Audit the catalog for duplicate titles, URLs and similar content",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser


def check_duplicates(catalog: JsonFileCatalog) -> int:
    report = find_duplicates(catalog.load())
    print(report.render_text())
    return 1 if report.has_issues else 0


def lookup(bridge: ContextBridge, event: SelectionEvent, *, as_json: bool) -> int:
    context_map = bridge.on_selection(event)
    if context_map is None:
        sys.stderr.write("Selection is blank; nothing to look up.\n")
        return 2
    if as_json:
        print(json.dumps(context_map.to_payload(), indent=2, ensure_ascii=False))
    else:
        print(render_text(context_map))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = PipelineConfig.from_env()
    if args.catalog is not None:
        config.catalog_path = args.catalog
    catalog = JsonFileCatalog(config.catalog_path)
    if args.check_duplicates:
        return check_duplicates(catalog)

    text = args.text if args.text is not None else sys.stdin.read()
    bridge = ContextBridge(
        state_machine=ContextBridgeStateMachine(catalog, config=config),
        config=config,
    )
    event = SelectionEvent(
        selected_text=text,
        file_name=args.file,
        file_language=args.language,
        line_number=args.line,
    )
    return lookup(bridge, event, as_json=args.json)


if __name__ == "__main__":
    sys.exit(main())
