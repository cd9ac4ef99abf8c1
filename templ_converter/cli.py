"""Command line entry point: ``templ-convert``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .api import convert_json, convert_source
from .errors import ConversionError
from .options import ConversionOptions, IndentStyle, PersistenceMode

logger = logging.getLogger(__name__)

_DEMO_SOURCE = """\
import { useState } from 'react';

export default function Counter({ step = 1 }) {
  const [count, setCount] = useState(0);
  return (
    <div className="counter">
      <span>{count}</span>
      <button onClick={() => setCount(count + step)}>Add</button>
    </div>
  );
}
"""

_SOURCE_GRAMMARS = {".tsx": "tsx", ".ts": "tsx", ".jsx": "tsx", ".js": "tsx"}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a React component into templ, Go handlers and an htmx script")
    parser.add_argument("file", nargs="?",
                        help="Component model (.json) or component source (.jsx/.tsx)")
    parser.add_argument("--name", default="",
                        help="Component name override")
    parser.add_argument("--namespace", default="templates",
                        help="Go package of the generated files (default: templates)")
    parser.add_argument("--persistence", default=PersistenceMode.MEMORY.value,
                        choices=[mode.value for mode in PersistenceMode],
                        help="Where generated handlers keep state (default: memory)")
    parser.add_argument("--no-partial-updates", action="store_true",
                        help="Render a static template without htmx round trips")
    parser.add_argument("--no-comments", action="store_true",
                        help="Omit comments from generated code")
    parser.add_argument("--tabs", action="store_true",
                        help="Indent generated code with tabs")
    parser.add_argument("--indent-width", type=int, default=4,
                        help="Spaces per indent level (default: 4)")
    parser.add_argument("--import", dest="imports", action="append", default=[],
                        help="Extra Go import path (repeatable)")
    parser.add_argument("--debug", action="store_true",
                        help="Log every pipeline stage")
    parser.add_argument("--summary", action="store_true",
                        help="Print only the conversion summary")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    return parser


def options_from_args(args: argparse.Namespace) -> ConversionOptions:
    return ConversionOptions(
        partial_updates=not args.no_partial_updates,
        component_name=args.name,
        namespace=args.namespace,
        include_comments=not args.no_comments,
        custom_imports=tuple(args.imports),
        persistence=PersistenceMode(args.persistence),
        debug=args.debug,
        indent_style=IndentStyle.TABS if args.tabs else IndentStyle.SPACES,
        indent_width=args.indent_width,
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    options = options_from_args(args)

    try:
        if not args.file:
            print("No file provided. Using built-in demo:\n")
            print(_DEMO_SOURCE)
            result = convert_source(_DEMO_SOURCE, options)
        else:
            path = Path(args.file)
            text = path.read_text(encoding="utf-8")
            if path.suffix == ".json":
                result = convert_json(text, options)
            else:
                result = convert_source(text, options, _SOURCE_GRAMMARS.get(path.suffix, "tsx"))
    except ConversionError as exc:
        logger.error("%s", exc)
        return 1

    print(result.summary())
    if args.summary:
        return 0
    for filename, content in result.artifacts().items():
        print(f"\n═══ {filename} ═══")
        print(content)
    return 0


if __name__ == "__main__":
    sys.exit(main())
