"""
Command line entry point.

    lifeline validate [FILE] [--strict]
    lifeline dot [FILE] [--mode simple|detailed] [--language L] [-o OUT]
    lifeline export [FILE] [--format yaml|json]
    lifeline walk [FILE] [--language L] [--state-file F]

Without FILE the built-in coding and Git help tree is used.

`walk` is a terminal presentation layer for the navigation engine:
numbers choose options, and the letters below drive the rest.
"""
from __future__ import annotations

import argparse
import logging
import sys
import warnings
from typing import Callable, List, Optional, TextIO

from lifeline import __version__
from lifeline.backends.dot_generator import DotMode, generate_dot
from lifeline.clipboard import MemoryClipboard, html_to_text
from lifeline.config import CANONICAL_LANGUAGE, LOG_LEVEL, STATE_FILE
from lifeline.content import build_default_content
from lifeline.engine import IntroView, NavigationEngine, QuestionView, ResultView, View
from lifeline.errors import ContentValidationError, LifelineError
from lifeline.model import ContentModel
from lifeline.serialization import content_to_json, content_to_yaml, load_content_file
from lifeline.storage import JsonFileStore
from lifeline.validation import validate_content

WALK_HELP = "[number] choose  g general  t git  b back  r reset  l <lang> language  c copy  q quit"


def _load(path: Optional[str]) -> ContentModel:
    if path:
        return load_content_file(path)
    return build_default_content()


def render_view(view: View, out: TextIO) -> None:
    """Paint a view as plain text."""
    if isinstance(view, IntroView):
        print("\n== Technical Lifeline ==", file=out)
        print("Start with g (general coding help) or t (Git & GitHub help).", file=out)
    elif isinstance(view, QuestionView):
        print(f"\n{view.question}", file=out)
        for i, opt in enumerate(view.options, 1):
            print(f"  {i}. {html_to_text(opt.text)}", file=out)
    elif isinstance(view, ResultView):
        print(f"\n## {view.title}", file=out)
        print(html_to_text(view.body), file=out)
    print(f"\n{WALK_HELP}" + ("" if view.back_enabled else "  (back disabled)"), file=out)


def walk(engine: NavigationEngine, read_line: Callable[[], str], out: TextIO) -> None:
    """Run the interactive loop until `q` or end of input."""
    clipboard = MemoryClipboard()
    view: View = engine.start()
    render_view(view, out)

    while True:
        try:
            line = read_line().strip()
        except EOFError:
            break
        if not line:
            continue

        command, _, arg = line.partition(" ")
        if command == "q":
            break
        if command.isdigit():
            view = engine.choose(int(command) - 1)
        elif command == "g":
            view = engine.start_path("general")
        elif command == "t":
            view = engine.start_path("git")
        elif command == "b":
            view = engine.go_back()
        elif command == "r":
            view = engine.reset()
        elif command == "l" and arg.strip():
            view = engine.set_language(arg.strip())
        elif command == "c":
            note = engine.copy_result(clipboard)
            print(note.message, file=out)
            if note.ok:
                print(clipboard.copied[-1], file=out)
            continue
        else:
            print(WALK_HELP, file=out)
            continue
        render_view(view, out)


def _cmd_validate(args, out: TextIO) -> int:
    content = _load(args.file)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            report = validate_content(content, strict=args.strict)
    except ContentValidationError as e:
        print(f"INVALID: {content.name}", file=out)
        for finding in e.findings:
            print(f"  - {finding}", file=out)
        return 1

    print(f"{report.content_name}: {report.question_count} question(s), "
          f"{report.result_count} result(s), {report.total_options} option(s)", file=out)
    if report.languages:
        print(f"Languages: {', '.join(sorted(report.languages))}", file=out)
    for msg in report.errors:
        print(f"  ERROR {msg}", file=out)
    for msg in report.notes:
        print(f"  NOTE  {msg}", file=out)
    if report.is_valid:
        print("OK", file=out)
    return 0 if report.is_valid else 1


def _cmd_dot(args, out: TextIO) -> int:
    dot = generate_dot(_load(args.file), mode=DotMode(args.mode), language=args.language)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(dot)
    else:
        print(dot, file=out)
    return 0


def _cmd_export(args, out: TextIO) -> int:
    content = _load(args.file)
    text = content_to_json(content) if args.format == "json" else content_to_yaml(content)
    print(text, file=out)
    return 0


def _cmd_walk(args, out: TextIO) -> int:
    store = JsonFileStore(args.state_file) if args.state_file else None
    engine = NavigationEngine(_load(args.file), store=store)
    if args.language:
        engine.set_language(args.language)
    walk(engine, input, out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lifeline", description="Decision-tree help for coding and Git problems")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Check a content file")
    p.add_argument("file", nargs="?", help="Content file (.json/.yaml); built-in tree if omitted")
    p.add_argument("--strict", action="store_true", help="Fail on the first set of structural problems")
    p.set_defaults(func=_cmd_validate)

    p = sub.add_parser("dot", help="Export the tree as a Graphviz diagram")
    p.add_argument("file", nargs="?")
    p.add_argument("--mode", choices=[m.value for m in DotMode], default=DotMode.SIMPLE.value)
    p.add_argument("--language", default=CANONICAL_LANGUAGE)
    p.add_argument("-o", "--output", help="Write to this file instead of stdout")
    p.set_defaults(func=_cmd_dot)

    p = sub.add_parser("export", help="Print the tree as YAML or JSON")
    p.add_argument("file", nargs="?")
    p.add_argument("--format", choices=["yaml", "json"], default="yaml")
    p.set_defaults(func=_cmd_export)

    p = sub.add_parser("walk", help="Navigate the tree in the terminal")
    p.add_argument("file", nargs="?")
    p.add_argument("--language", default=None)
    p.add_argument("--state-file", default=STATE_FILE, help="Where the language preference is kept")
    p.set_defaults(func=_cmd_walk)

    return parser


def main(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.WARNING))
    args = build_parser().parse_args(argv)
    try:
        return args.func(args, out)
    except (LifelineError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
