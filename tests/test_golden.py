"""Golden tests: render and cross-check the grammars under tests/golden."""

import pytest
from pathlib import Path
from grammar2html.colorizer import render_tokens
from grammar2html.grammar.canonical import canonicalize_production
from grammar2html.grammar.compare import compare, enrich_links
from grammar2html.grammar.loader import load_grammar
from grammar2html.html_emitter import emit_html
from grammar2html.lines import coalesce_lines, line_text

GOLDEN_DIR = Path(__file__).parent / "golden"


def _load(name: str):
    path = GOLDEN_DIR / f"{name}.json"
    assert path.exists(), f"Missing input: {path}"
    return load_grammar(path)


class TestGolden:
    def test_rendered_lines(self):
        grammar = _load("expr.authority")
        expected = (GOLDEN_DIR / "expr.expected.txt").read_text(encoding="utf-8")
        actual = [line_text(line) for line in coalesce_lines(render_tokens(grammar))]
        assert actual == expected.split("\n")[:-1]

    def test_authority_matches_copy(self):
        report = compare(_load("expr.authority"), _load("expr.copy"))
        assert report.ok, report.format()

    def test_self_comparison(self):
        g = _load("expr.authority")
        assert compare(g, g).ok

    def test_canonical_forms(self):
        g = _load("expr.authority")
        assert [canonicalize_production(p) for p in g.productions if p.body] == [
            "start: expr;",
            "expr: term ( '+' term )*;",
            "term: factor | literal;",
            "factor: '(' expr ')';",
            "literal: [0-9]+;",
        ]


class TestGoldenEnriched:
    def test_links_transplanted(self):
        authority = enrich_links(_load("expr.authority"), _load("expr.copy"))
        assert authority.link_for("expr").target == "expressions.md#expressions"
        assert authority.link_for("term").name == "Terms"
        assert authority.link_for("factor") is None
        assert authority.link_for("start") is None

    @pytest.mark.parametrize("name", ["expr", "term", "literal"])
    def test_html_links_out(self, name):
        authority = enrich_links(_load("expr.authority"), _load("expr.copy"))
        out = emit_html(authority)
        link = authority.link_for(name)
        assert f'<a id="{name}" href="{link.target}"' in out
