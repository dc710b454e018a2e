"""CLI entry point: python -m termread [FILE|-] [options]"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from termread import settings
from termread.items import Document, Node
from termread.profiles import load_profile
from termread.query import ParseError, parse
from termread.settings import DEFAULT_OPTIONS, ParseOptions

logger = logging.getLogger(__name__)

# Longest text shown on one tree label
_LABEL_TEXT_MAX = 80


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termread",
        description=(
            "Extract a clean reading tree from an HTML page.\n"
            "Navigation chrome is separated from the main content."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("file", nargs="?", default="-", metavar="FILE",
                        help="HTML file to read, or '-' for stdin (default: -)")
    parser.add_argument("--url", default="", metavar="URL",
                        help="Page URL, stored on the document and used for profile lookup")
    parser.add_argument("--format", choices=["tree", "text", "json"], default="tree",
                        help="Output format (default: tree)")
    parser.add_argument("--no-latex", action="store_true", default=False,
                        help="Leave LaTeX and MathML untouched")
    parser.add_argument("--no-tables", action="store_true", default=False,
                        help="Walk tables as plain containers instead of classifying them")
    parser.add_argument("--profile", default=None, metavar="YAML",
                        help="YAML option profile with per-domain overrides")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help=f"Logging level (default: {settings.LOG_LEVEL})")
    return parser


def _resolve_options(args: argparse.Namespace) -> ParseOptions:
    """Profile options (if any) with command-line flags applied on top."""
    options = load_profile(args.profile, args.url) if args.profile else DEFAULT_OPTIONS
    overrides: dict[str, Any] = {}
    if args.no_latex:
        overrides["latex_enabled"] = False
    if args.no_tables:
        overrides["tables_enabled"] = False
    return options.model_copy(update=overrides) if overrides else options


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def _node_label(node: Node) -> str:
    label = f"[bold]{node.type.value}[/bold]"
    if node.id:
        label += f" [dim]#{escape(node.id)}[/dim]"
    if node.text:
        text = node.text.replace("\n", " ")
        if len(text) > _LABEL_TEXT_MAX:
            text = text[:_LABEL_TEXT_MAX] + "..."
        label += f" {escape(repr(text))}"
    if node.href:
        label += f" [cyan]-> {escape(node.href)}[/cyan]"
    if node.form_action or node.form_method:
        label += f" [yellow]{node.form_method} {escape(node.form_action)}[/yellow]"
    if node.input_type:
        label += f" [yellow]<{node.input_type} name={escape(node.input_name)}>[/yellow]"
    if node.is_header:
        label += " [magenta](header)[/magenta]"
    return label


def _add_subtree(tree: Tree, node: Node) -> None:
    branch = tree.add(_node_label(node))
    for child in node.children:
        _add_subtree(branch, child)


def _render_tree(doc: Document) -> Tree:
    header = f"[bold cyan]{escape(doc.title) or '(untitled)'}[/bold cyan]"
    if doc.lang:
        header += f" [dim]lang={doc.lang}[/dim]"
    if doc.theme_color:
        header += f" [{doc.theme_color}]■ {doc.theme_color}[/]"
    tree = Tree(header)

    nav = tree.add(f"[bold]navigation[/bold] ({len(doc.navigation)})")
    for section in doc.navigation:
        _add_subtree(nav, section)

    content = tree.add("[bold]content[/bold]")
    for child in doc.content.children:
        _add_subtree(content, child)
    return tree


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=settings.LOG_FORMAT)

    try:
        options = _resolve_options(args)
    except (OSError, ValidationError, yaml.YAMLError) as exc:
        print(f"ERROR: Could not load profile {args.profile!r}: {exc}", file=sys.stderr)
        return 1
    logger.debug("parse options: %s", options.model_dump())

    try:
        markup = _read_input(args.file)
    except OSError as exc:
        print(f"ERROR: Could not read {args.file!r}: {exc}", file=sys.stderr)
        return 1

    try:
        doc = parse(markup, url=args.url, options=options)
    except ParseError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(doc.model_dump_json(indent=2))
    elif args.format == "text":
        print(doc.plain_text_for_translation())
    else:
        Console().print(_render_tree(doc))
    return 0


if __name__ == "__main__":
    sys.exit(main())
