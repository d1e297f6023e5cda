from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from . import __version__
from .dom import Document, Element
from .errors import AnchorXPathError
from .generator import generate_xpath
from .history_store import HistoryStore
from .html_loader import parse_html
from .page_snapshot import capture_url
from .resolver import resolve_selector
from .selector_rules import normalize_space

DEFAULT_DATA_DIR = Path.home() / ".anchorxpath"


def _build_logger(data_dir: Path, verbose: bool) -> logging.Logger:
    logger = logging.getLogger("anchorxpath")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if logger.handlers:
        return logger

    logger.propagate = False
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(data_dir / "cli.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
    return logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anchorxpath",
        description="Generate template-stable XPath selectors and resolve them back.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR, help="History and log directory.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log candidate selection details.")
    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Generate a selector for one element.")
    source = generate.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="HTML file to parse.")
    source.add_argument("--url", help="Page to render with Playwright before generating.")
    generate.add_argument("--target", required=True, help="Selector (plain or compound) picking the element.")
    generate.add_argument("--record", action="store_true", help="Save the result to the history store.")
    generate.add_argument("--page-url", default="", help="Page URL stored with --record for --file input.")
    generate.add_argument("--icon-url", default="", help="Favicon URL stored with --record.")

    resolve = commands.add_parser("resolve", help="Resolve a selector against an HTML file.")
    resolve.add_argument("file", type=Path)
    resolve.add_argument("selector")

    history = commands.add_parser("history", help="List or clear stored selectors.")
    history.add_argument("--clear", action="store_true")
    return parser


def describe_element(element: Element) -> str:
    attributes = " ".join(f'{name}="{value}"' for name, value in element.attributes.items())
    opening = f"<{element.local_name} {attributes}>" if attributes else f"<{element.local_name}>"
    text = normalize_space(element.text_content, limit=60)
    return f"{opening} {text}".rstrip()


def _load_file(path: Path) -> Document:
    return parse_html(path.read_text(encoding="utf-8"))


def _run_generate(args: argparse.Namespace, logger: logging.Logger) -> int:
    if args.url:
        snapshot = capture_url(args.url)
        document, page_url = snapshot.document, snapshot.url or args.url
    else:
        document, page_url = _load_file(args.file), args.page_url or args.file.resolve().as_uri()

    target = resolve_selector(document, args.target)
    if target is None:
        print(f"Target {args.target!r} matched nothing.", file=sys.stderr)
        return 2

    selector = generate_xpath(target)
    logger.info("Generated %r for target %r", selector, args.target)
    print(selector)

    if args.record:
        store = HistoryStore(base_dir=args.data_dir)
        store.save_item(
            selector=selector,
            page_url=page_url,
            icon_url=args.icon_url,
            inner_text=normalize_space(target.text_content, limit=200),
        )
    return 0


def _run_resolve(args: argparse.Namespace) -> int:
    element = resolve_selector(_load_file(args.file), args.selector)
    if element is None:
        print(f"Selector {args.selector!r} matched nothing.", file=sys.stderr)
        return 1
    print(describe_element(element))
    return 0


def _run_history(args: argparse.Namespace) -> int:
    store = HistoryStore(base_dir=args.data_dir)
    if args.clear:
        store.clear()
        return 0
    for item in store.get_items():
        print(f"{item.timestamp}\t{item.page_url}\t{item.selector}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    if sys.version_info < (3, 11):
        raise SystemExit(
            "anchorxpath requires Python 3.11+. "
            f"Current interpreter: {sys.executable} (Python {sys.version.split()[0]})"
        )
    args = _build_parser().parse_args(argv)
    logger = _build_logger(args.data_dir, args.verbose)

    try:
        if args.command == "generate":
            return _run_generate(args, logger)
        if args.command == "resolve":
            return _run_resolve(args)
        return _run_history(args)
    except (AnchorXPathError, OSError) as exc:
        logger.exception("Command %s failed", args.command)
        print(f"anchorxpath: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
