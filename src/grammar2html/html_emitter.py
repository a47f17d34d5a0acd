"""Lines -> colorized HTML.

Renders the coalesced lines of a grammar as a single <pre> block, one
<span> per style run. Production names get an ``id`` at their definition
so references can link to them; a definition that carries a link
annotation (transplanted from the prose document) links out to it.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Iterable

from grammar2html.colorizer import StyleTag, render_tokens
from grammar2html.ebnf_nodes import Grammar
from grammar2html.lines import Line, StyledRun, coalesce_lines
from grammar2html.settings_parser import Grammar2HtmlSettings, StyleSpec

log = logging.getLogger("grammar2html.html")

# One name plus the whitespace after it, or leading whitespace alone
RE_WORD = re.compile(r"\S+\s*|\s+")


class UnknownStyleError(ValueError):
    """A run carries a style that has no entry in the palette."""


class HtmlEmitter:
    """Emit an HTML document from coalesced lines."""

    def __init__(self, settings: Grammar2HtmlSettings | None = None,
                 grammar: Grammar | None = None):
        self.settings = settings or Grammar2HtmlSettings()
        self.grammar = grammar
        self._defined: set[str] = set(grammar.names()) if grammar else set()
        self._anchored: set[str] = set()

    def emit(self, lines: Iterable[Line], title: str | None = None) -> str:
        self._anchored = set()
        title = title or self.settings.title or "Grammar"
        out = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8">',
            f"<title>{html.escape(title)}</title>",
            "</head>",
            "<body>",
            '<pre style="font-family:Consolas,monospace">',
        ]
        n = 0
        for line in lines:
            out.append(self._emit_line(line))
            n += 1
        out.extend(["</pre>", "</body>", "</html>", ""])
        log.info("rendered %d lines", n)
        return "\n".join(out)

    def _emit_line(self, line: Line) -> str:
        parts = []
        for i, run in enumerate(line):
            is_definition = (
                i == 0 and len(line) > 1
                and line[1].text.lstrip().startswith(":")
            )
            parts.append(self._emit_run(run, is_definition))
        return "".join(parts)

    def _style(self, style: StyleTag) -> StyleSpec:
        if not isinstance(style, StyleTag) or style not in self.settings.palette:
            raise UnknownStyleError(f"bad style: {style!r}")
        return self.settings.palette[style]

    def _emit_run(self, run: StyledRun, is_definition: bool) -> str:
        spec = self._style(run.style)
        text = html.escape(run.text)
        name = run.text.strip()
        if run.style != StyleTag.PRODUCTION or not self._defined:
            return f'<span style="{spec.css}">{text}</span>'

        if is_definition and name in self._defined and name not in self._anchored:
            self._anchored.add(name)
            link = self.grammar.link_for(name)
            if link is not None and link.target:
                href = html.escape(link.target, quote=True)
                tip = html.escape(link.name or name, quote=True)
                return (f'<a id="{html.escape(name, quote=True)}" href="{href}" '
                        f'title="{tip}" style="{spec.css}">{text}</a>')
            return f'<span id="{html.escape(name, quote=True)}" style="{spec.css}">{text}</span>'

        # Adjacent references are merged into one run: link each name in it
        parts = []
        plain = ""
        for chunk in RE_WORD.findall(run.text):
            word = chunk.strip()
            if word not in self._defined:
                plain += chunk
                continue
            if plain:
                parts.append(f'<span style="{spec.css}">{html.escape(plain)}</span>')
                plain = ""
            href = "#" + html.escape(word, quote=True)
            parts.append(f'<a href="{href}" style="{spec.css};text-decoration:none">'
                         f'{html.escape(chunk)}</a>')
        if plain:
            parts.append(f'<span style="{spec.css}">{html.escape(plain)}</span>')
        return "".join(parts)


def emit_html(grammar: Grammar,
              settings: Grammar2HtmlSettings | None = None) -> str:
    """Convenience function to render a whole grammar as HTML."""
    emitter = HtmlEmitter(settings, grammar)
    title = emitter.settings.title or grammar.name
    return emitter.emit(coalesce_lines(render_tokens(grammar)), title)


def emit_html_lines(lines: Iterable[Line],
                    settings: Grammar2HtmlSettings | None = None,
                    title: str | None = None) -> str:
    """Render arbitrary lines (e.g. from colorize_plain_text) as HTML."""
    return HtmlEmitter(settings).emit(lines, title)
