"""Canonical text form of EBNF trees and productions.

The canonical form drops all trivia (whitespace, comments, newline flags)
so that two grammars read from differently laid-out sources can be compared
as plain strings. Choice alternatives keep their order: ``a | b`` and
``b | a`` are different canonical strings.
"""

from __future__ import annotations

from grammar2html.ebnf_nodes import (
    EBNF, EBNFKind, Production,
    GROUPING_KINDS, REPETITION_OPS, MalformedTreeError,
)


def quote_terminal(text: str) -> str:
    """Single-quote a terminal, escaping backslash and both quote marks."""
    escaped = text.replace("\\", "\\\\").replace("'", "\\'").replace('"', '\\"')
    return f"'{escaped}'"


def canonicalize(node: EBNF) -> str:
    match node.kind:
        case EBNFKind.TERMINAL:
            return quote_terminal(node.text)
        case EBNFKind.EXTENDED_TERMINAL | EBNFKind.REFERENCE:
            return node.text
        case EBNFKind.ONE_OR_MORE | EBNFKind.ZERO_OR_MORE | EBNFKind.ZERO_OR_ONE:
            op = REPETITION_OPS[node.kind]
            inner = canonicalize(node.child)
            if node.child.kind in GROUPING_KINDS:
                return f"( {inner} ){op}"
            return f"{inner}{op}"
        case EBNFKind.CHOICE:
            return " | ".join(canonicalize(c) for c in node.children)
        case EBNFKind.SEQUENCE:
            parts = []
            for c in node.children:
                if c.kind == EBNFKind.CHOICE:
                    parts.append(f"( {canonicalize(c)} )")
                else:
                    parts.append(canonicalize(c))
            return " ".join(parts)
        case _:
            raise MalformedTreeError(f"Unrecognized EBNF kind: {node.kind!r}")


def canonicalize_production(production: Production) -> str:
    """``name: body;`` or the empty marker for documentation-only entries."""
    if production.body is None:
        return ""
    return f"{production.name}: {canonicalize(production.body)};"
