"""Reader/writer for the JSON grammar interchange format.

Grammar source parsers (the .g4 reader and the markdown extractor) hand
their result over as a JSON document:

    {"name": "CSharp",
     "productions": [
        {"name": "expr", "starts_on_new_line": false, "comment": null,
         "link": "#expressions", "link_name": "Expressions",
         "body": {"kind": "sequence", "children": [...]}}]}

EBNF nodes are objects with a ``kind`` (lower-case EBNFKind value), either
``text`` or ``children``, and the optional trivia keys ``whitespace``,
``comment`` and ``newline``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from grammar2html.ebnf_nodes import (
    EBNF, EBNFKind, Grammar, Production, ProductionLink,
    MalformedTreeError, SCALAR_KINDS,
)

log = logging.getLogger("grammar2html.loader")


class GrammarLoadError(ValueError):
    """The interchange document does not describe a valid grammar."""

    def __init__(self, where: str, message: str):
        super().__init__(f"{where}: {message}")
        self.where = where


def load_grammar(path: str | Path) -> Grammar:
    """Read a grammar interchange file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise GrammarLoadError(str(path), f"invalid JSON ({e})") from e
    grammar = grammar_from_dict(data)
    if grammar.name is None:
        grammar.name = path.stem
    log.info("loaded %d productions from %s", len(grammar.productions), path)
    return grammar


def grammar_from_dict(data: Any) -> Grammar:
    if not isinstance(data, dict):
        raise GrammarLoadError("<root>", "expected an object")
    raw = data.get("productions")
    if not isinstance(raw, list):
        raise GrammarLoadError("productions", "expected a list")

    productions: list[Production] = []
    links: dict[str, ProductionLink] = {}
    for i, entry in enumerate(raw):
        where = f"productions[{i}]"
        p = _production_from_dict(entry, where)
        productions.append(p)
        target = _optional_str(entry, "link", where)
        link_name = _optional_str(entry, "link_name", where)
        if p.name is not None and p.name not in links and (target or link_name):
            links[p.name] = ProductionLink(target=target, name=link_name)

    name = data.get("name")
    return Grammar(productions=tuple(productions),
                   name=name if isinstance(name, str) else None,
                   links=links)


def _production_from_dict(entry: Any, where: str) -> Production:
    if not isinstance(entry, dict):
        raise GrammarLoadError(where, "expected an object")
    name = _optional_str(entry, "name", where)
    comment = _optional_str(entry, "comment", where)
    body = None
    if entry.get("body") is not None:
        body = ebnf_from_dict(entry["body"], f"{where}.body")
    return Production(
        name=name,
        body=body,
        comment=comment,
        starts_on_new_line=bool(entry.get("starts_on_new_line", False)),
    )


def ebnf_from_dict(data: Any, where: str = "<ebnf>") -> EBNF:
    if not isinstance(data, dict):
        raise GrammarLoadError(where, "expected an object")
    try:
        kind = EBNFKind(data.get("kind"))
    except ValueError:
        raise GrammarLoadError(where, f"unknown kind {data.get('kind')!r}") from None

    raw_children = data.get("children", [])
    if not isinstance(raw_children, list):
        raise GrammarLoadError(where, "children must be a list")
    children = tuple(
        ebnf_from_dict(c, f"{where}.children[{i}]")
        for i, c in enumerate(raw_children)
    )

    try:
        return EBNF(
            kind=kind,
            text=_optional_str(data, "text", where),
            children=children,
            whitespace=_optional_str(data, "whitespace", where) or "",
            comment=_optional_str(data, "comment", where),
            newline=bool(data.get("newline", False)),
        )
    except MalformedTreeError as e:
        raise GrammarLoadError(where, str(e)) from e


def _optional_str(entry: dict, key: str, where: str) -> str | None:
    value = entry.get(key)
    if value is not None and not isinstance(value, str):
        raise GrammarLoadError(f"{where}.{key}", "expected a string")
    return value


# --- Writing ---

def ebnf_to_dict(node: EBNF) -> dict[str, Any]:
    d: dict[str, Any] = {"kind": node.kind.value}
    if node.kind in SCALAR_KINDS:
        d["text"] = node.text
    else:
        d["children"] = [ebnf_to_dict(c) for c in node.children]
    if node.whitespace:
        d["whitespace"] = node.whitespace
    if node.comment is not None:
        d["comment"] = node.comment
    if node.newline:
        d["newline"] = True
    return d


def grammar_to_dict(grammar: Grammar) -> dict[str, Any]:
    productions = []
    for p in grammar.productions:
        entry: dict[str, Any] = {"name": p.name}
        if p.body is not None:
            entry["body"] = ebnf_to_dict(p.body)
        if p.comment is not None:
            entry["comment"] = p.comment
        if p.starts_on_new_line:
            entry["starts_on_new_line"] = True
        link = grammar.link_for(p.name) if p.name is not None else None
        if link is not None:
            entry["link"] = link.target
            entry["link_name"] = link.name
        productions.append(entry)
    d: dict[str, Any] = {"productions": productions}
    if grammar.name is not None:
        d["name"] = grammar.name
    return d


def save_grammar(grammar: Grammar, path: str | Path) -> None:
    Path(path).write_text(
        json.dumps(grammar_to_dict(grammar), indent=2) + "\n", encoding="utf-8"
    )
