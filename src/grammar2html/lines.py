"""Token stream -> lines of merged style runs.

Takes the flat stream produced by the colorizer and cuts it into lines,
minimizing along the way by combining adjacent tokens of the same style.
Whitespace-only tokens never start a run of their own: they are folded
into the neighbouring run. Trailing whitespace on a line is trimmed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from grammar2html.colorizer import LineBreak, StreamItem, StyledToken, StyleTag


@dataclass(frozen=True)
class StyledRun:
    text: str
    style: StyleTag


Line = tuple[StyledRun, ...]


def _is_blank(text: str) -> bool:
    return not text.strip()


def coalesce_lines(items: Iterable[StreamItem]) -> Iterator[Line]:
    encountered_first_linebreak = False
    line: list[StyledRun] = []
    run: StyledRun | None = None

    for item in items:
        if isinstance(item, LineBreak):
            if run is not None:
                text = run.text.rstrip()
                if not _is_blank(text):
                    line.append(StyledRun(text, run.style))
            # Only a blank line before any content is suppressed
            if encountered_first_linebreak or line:
                yield tuple(line)
            encountered_first_linebreak = True
            line = []
            run = None
        elif not isinstance(item, StyledToken):
            raise TypeError(f"Expected StyledToken or LINE_BREAK, got {item!r}")
        elif run is None:
            run = StyledRun(item.text, item.style)
        elif _is_blank(run.text):
            # leading whitespace moves into the new token's run
            run = StyledRun(run.text + item.text, item.style)
        elif _is_blank(item.text):
            run = StyledRun(run.text + item.text, run.style)
        elif run.style == item.style:
            run = StyledRun(run.text + item.text, run.style)
        else:
            line.append(run)
            run = StyledRun(item.text, item.style)

    if run is not None:
        text = run.text.rstrip()
        if not _is_blank(text):
            line.append(StyledRun(text, run.style))
    if line:
        yield tuple(line)


def line_text(line: Line) -> str:
    return "".join(r.text for r in line)
