"""Grammar -> styled token stream.

Walks a Grammar depth first and yields ``StyledToken`` items interleaved
with ``LINE_BREAK``. The stream is what ``lines.coalesce_lines`` consumes.

Spacing between elements is not invented here: it comes from each node's
whitespace trivia, which is emitted as a COMMENT-styled token so that the
line coalescer folds it into the neighbouring run.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

from grammar2html.ebnf_nodes import (
    EBNF, EBNFKind, Grammar, Production,
    GROUPING_KINDS, REPETITION_OPS, MalformedTreeError,
)
from grammar2html.grammar.canonical import quote_terminal


class StyleTag(Enum):
    PLAIN_TEXT = "PlainText"
    PRODUCTION = "Production"
    COMMENT = "Comment"
    TERMINAL = "Terminal"
    EXTENDED_TERMINAL = "ExtendedTerminal"


@dataclass(frozen=True)
class StyledToken:
    text: str
    style: StyleTag


class LineBreak:
    """End-of-line marker in a token stream. Use the ``LINE_BREAK`` singleton."""
    _instance: LineBreak | None = None

    def __new__(cls) -> LineBreak:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "LINE_BREAK"


LINE_BREAK = LineBreak()

StreamItem = Union[StyledToken, LineBreak]

INDENT = "\t"

RE_NEWLINE = re.compile(r"\r\n|\r|\n")


def _plain(text: str) -> StyledToken:
    return StyledToken(text, StyleTag.PLAIN_TEXT)


def _comment(text: str) -> StyledToken:
    return StyledToken(text, StyleTag.COMMENT)


def render_tokens(grammar: Grammar) -> Iterator[StreamItem]:
    for p in grammar.productions:
        yield from render_production(p)


def render_production(p: Production) -> Iterator[StreamItem]:
    if p.body is None and not p.comment:
        yield LINE_BREAK
        return
    if p.body is None:
        yield _comment(f"// {p.comment}")
        yield LINE_BREAK
        return

    yield StyledToken(p.name or "", StyleTag.PRODUCTION)
    yield _plain(":")
    if p.starts_on_new_line:
        yield LINE_BREAK
        yield _plain(INDENT)
        yield _plain("| ")
    else:
        yield _plain(" ")
    yield from render_ebnf(p.body)
    yield _plain(";")
    if p.comment:
        yield _comment(f"  //{p.comment}")
    yield LINE_BREAK


def render_ebnf(node: EBNF) -> Iterator[StreamItem]:
    match node.kind:
        case EBNFKind.TERMINAL:
            yield StyledToken(quote_terminal(node.text), StyleTag.TERMINAL)
        case EBNFKind.EXTENDED_TERMINAL:
            yield StyledToken(node.text, StyleTag.EXTENDED_TERMINAL)
        case EBNFKind.REFERENCE:
            yield StyledToken(node.text, StyleTag.PRODUCTION)
        case EBNFKind.ONE_OR_MORE | EBNFKind.ZERO_OR_MORE | EBNFKind.ZERO_OR_ONE:
            op = REPETITION_OPS[node.kind]
            if node.child.kind in GROUPING_KINDS:
                yield _plain("( ")
                yield from render_ebnf(node.child)
                yield _plain(" )")
            else:
                yield from render_ebnf(node.child)
            yield _plain(op)
        case EBNFKind.CHOICE:
            for i, c in enumerate(node.children):
                if i > 0:
                    yield _plain("| ")
                yield from render_ebnf(c)
        case EBNFKind.SEQUENCE:
            last_was_indent = False
            for c in node.children:
                if last_was_indent:
                    yield _plain("  ")
                if c.kind == EBNFKind.CHOICE:
                    yield _plain("( ")
                    yield from render_ebnf(c)
                    yield _plain(" )")
                    last_was_indent = False
                else:
                    last_was_indent = False
                    for item in render_ebnf(c):
                        yield item
                        last_was_indent = (
                            isinstance(item, StyledToken) and item.text == INDENT
                        )
        case _:
            raise MalformedTreeError(f"Unrecognized EBNF kind: {node.kind!r}")

    if node.whitespace:
        yield _comment(node.whitespace)
    if node.comment:
        yield _comment(f" //{node.comment}")
    if node.newline:
        yield LINE_BREAK
        yield _plain(INDENT)


def colorize_plain_text(src: str) -> Iterator[StreamItem]:
    """Token stream for text that is not a grammar: one plain token per line."""
    lines = RE_NEWLINE.split(src)
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        if line:
            yield _plain(line)
        yield LINE_BREAK

