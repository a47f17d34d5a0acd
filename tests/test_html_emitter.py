"""Tests for the HTML emitter."""

import pytest
from grammar2html.colorizer import StyleTag, colorize_plain_text, render_tokens
from grammar2html.ebnf_nodes import (
    Grammar, Production, ProductionLink, reference, terminal, sequence, with_trivia,
)
from grammar2html.html_emitter import (
    HtmlEmitter, UnknownStyleError, emit_html, emit_html_lines,
)
from grammar2html.lines import StyledRun, coalesce_lines
from grammar2html.settings_parser import Grammar2HtmlSettings, default_palette


def _grammar(**kwargs) -> Grammar:
    return Grammar(
        (
            Production("start", sequence(with_trivia(reference("expr"), " "), terminal("<EOF>"))),
            Production("expr", terminal("x")),
        ),
        name="Demo",
        **kwargs,
    )


class TestEmitHtml:
    def test_document_shape(self):
        out = emit_html(_grammar())
        assert out.startswith("<!DOCTYPE html>")
        assert "<title>Demo</title>" in out
        assert "<pre" in out and "</pre>" in out

    def test_settings_title_wins(self):
        out = emit_html(_grammar(), Grammar2HtmlSettings(title="Other"))
        assert "<title>Other</title>" in out

    def test_colours(self):
        out = emit_html(_grammar())
        assert 'style="color:rgb(163,21,21)">&#x27;x&#x27;</span>' in out

    def test_definition_anchor(self):
        out = emit_html(_grammar())
        assert '<span id="expr" style="color:rgb(106,90,205)">expr</span>' in out

    def test_reference_links_to_definition(self):
        out = emit_html(_grammar())
        assert '<a href="#expr"' in out
        assert ">expr </a>" in out

    def test_definition_with_link(self):
        g = _grammar(links={"expr": ProductionLink("spec.md#expr", "Expressions")})
        out = emit_html(g)
        assert '<a id="expr" href="spec.md#expr" title="Expressions"' in out

    def test_terminal_escaped(self):
        out = emit_html(_grammar())
        assert "&#x27;&lt;EOF&gt;&#x27;" in out

    def test_adjacent_references_each_link(self):
        g = Grammar((
            Production("start", sequence(
                with_trivia(reference("a"), " "),
                with_trivia(reference("undefined"), " "),
                reference("b"),
            )),
            Production("a", terminal("x")),
            Production("b", terminal("y")),
        ))
        out = emit_html(g)
        css = "color:rgb(106,90,205)"
        assert f'<a href="#a" style="{css};text-decoration:none">a </a>' in out
        assert f'<span style="{css}">undefined </span>' in out
        assert f'<a href="#b" style="{css};text-decoration:none">b</a>' in out

    def test_emitter_reused(self):
        g = _grammar()
        emitter = HtmlEmitter(grammar=g)
        first = emitter.emit(coalesce_lines(render_tokens(g)))
        second = emitter.emit(coalesce_lines(render_tokens(g)))
        assert '<span id="expr"' in first
        assert first == second


class TestEmitLines:
    def test_plain_text(self):
        out = emit_html_lines(coalesce_lines(colorize_plain_text("a < b\n")), title="Code")
        assert '<span style="color:rgb(0,0,0)">a &lt; b</span>' in out
        assert "<title>Code</title>" in out

    def test_unknown_style_fails(self):
        with pytest.raises(UnknownStyleError):
            emit_html_lines([(StyledRun("x", "Keyword"),)])

    def test_style_missing_from_palette_fails(self):
        palette = default_palette()
        del palette[StyleTag.COMMENT]
        emitter = HtmlEmitter(Grammar2HtmlSettings(palette=palette))
        with pytest.raises(UnknownStyleError):
            emitter.emit([(StyledRun("// c", StyleTag.COMMENT),)])
