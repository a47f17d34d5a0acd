"""CLI entry point for grammar2html: grammar cross-check and HTML rendering."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from grammar2html.grammar.compare import compare, enrich_links, validate_grammar
from grammar2html.grammar.loader import GrammarLoadError, load_grammar
from grammar2html.html_emitter import emit_html
from grammar2html.settings_parser import Grammar2HtmlSettings, parse_settings_file


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="grammar2html",
        description="Check a grammar against the copy extracted from its prose "
                    "specification and render it as colorized HTML",
    )
    parser.add_argument(
        "authority",
        help="Path to the authoritative grammar (JSON interchange file)",
    )
    parser.add_argument(
        "--copy",
        default=None,
        help="Grammar extracted from the specification; must match the authority",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output .html file path (default: stdout)",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="JSON settings file (palette, start symbol, title)",
    )
    parser.add_argument(
        "--list-productions",
        action="store_true",
        help="List all productions in canonical form and exit",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output (structural warnings, progress)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = Grammar2HtmlSettings()
    if args.settings:
        try:
            settings = parse_settings_file(args.settings)
        except (OSError, ValueError) as e:
            print(f"Error reading settings {args.settings}: {e}", file=sys.stderr)
            sys.exit(1)

    authority = _load(args.authority)

    if args.list_productions:
        _print_productions(authority)
        return

    if args.verbose:
        for w in validate_grammar(authority, settings.start_symbol):
            print(f"warning: {w}", file=sys.stderr)

    if args.copy:
        copy = _load(args.copy)
        report = compare(authority, copy, settings.start_symbol)
        if not report.ok:
            print(report.format(), file=sys.stderr)
            print("Error: grammar mismatch", file=sys.stderr)
            sys.exit(1)
        enrich_links(authority, copy)

    html_text = emit_html(authority, settings)

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(html_text, encoding="utf-8")
        print(f"Written: {output_path}", file=sys.stderr)
    else:
        print(html_text)


def _load(path_str: str):
    path = Path(path_str)
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        return load_grammar(path)
    except (OSError, GrammarLoadError) as e:
        print(f"Error parsing {path}: {e}", file=sys.stderr)
        sys.exit(1)


def _print_productions(grammar) -> None:
    """Print all productions in canonical form."""
    from grammar2html.grammar.canonical import canonicalize, canonicalize_production

    print(f"{grammar.name or 'grammar'}: {len(grammar.productions)} production(s)")
    for p in grammar.productions:
        if p.body is None:
            if p.comment:
                print(f"  // {p.comment}")
            continue
        if p.name is None:
            print(f"  <unnamed>: {canonicalize(p.body)};")
            continue
        print(f"  {canonicalize_production(p)}")
        link = grammar.link_for(p.name)
        if link is not None:
            print(f"    -> {link.target} ({link.name})")


if __name__ == "__main__":
    main()
