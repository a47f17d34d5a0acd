"""Parser for grammar2html settings files.

Settings files are JSON documents. Recognized keys:
- Palette: style name -> [r, g, b] or {"rgb": [r, g, b], "italic": bool}
- StartSymbol: production exempt from the missing-name checks
- Title: HTML document title (default: the grammar name)

Values may be given bare or wrapped as {"value": ...}. Unknown keys are
ignored and unusable values keep their defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from grammar2html.colorizer import StyleTag


@dataclass(frozen=True)
class StyleSpec:
    """How one StyleTag is displayed."""
    red: int = 0
    green: int = 0
    blue: int = 0
    italic: bool = False

    @property
    def css(self) -> str:
        css = f"color:rgb({self.red},{self.green},{self.blue})"
        if self.italic:
            css += ";font-style:italic"
        return css


def default_palette() -> dict[StyleTag, StyleSpec]:
    return {
        StyleTag.PLAIN_TEXT: StyleSpec(0, 0, 0),
        StyleTag.PRODUCTION: StyleSpec(106, 90, 205),
        StyleTag.COMMENT: StyleSpec(0, 128, 0),
        StyleTag.TERMINAL: StyleSpec(163, 21, 21),
        StyleTag.EXTENDED_TERMINAL: StyleSpec(0, 0, 0, italic=True),
    }


@dataclass
class Grammar2HtmlSettings:
    palette: dict[StyleTag, StyleSpec] = field(default_factory=default_palette)
    start_symbol: str = "start"
    title: str | None = None


def _get_value(data: dict, key: str, default: Any = None) -> Any:
    """Extract a value that may be wrapped as {"value": ...}."""
    if key not in data:
        return default
    entry = data[key]
    if isinstance(entry, dict) and "value" in entry:
        return entry["value"]
    return entry


def _parse_style_spec(raw: Any) -> StyleSpec:
    """Parse [r, g, b] or {"rgb": [r, g, b], "italic": bool}."""
    italic = False
    if isinstance(raw, dict):
        italic = bool(raw.get("italic", False))
        raw = raw.get("rgb")
    if not isinstance(raw, (list, tuple)) or len(raw) != 3:
        raise ValueError(f"bad colour: {raw!r}")
    r, g, b = (int(c) for c in raw)
    for c in (r, g, b):
        if not 0 <= c <= 255:
            raise ValueError(f"colour component out of range: {c}")
    return StyleSpec(r, g, b, italic)


def settings_from_dict(data: dict) -> Grammar2HtmlSettings:
    settings = Grammar2HtmlSettings()

    # Palette (partial palettes override the defaults style by style)
    val = _get_value(data, "Palette")
    if isinstance(val, dict):
        for style_name, raw in val.items():
            try:
                style = StyleTag(style_name)
                settings.palette[style] = _parse_style_spec(raw)
            except (ValueError, TypeError):
                pass

    val = _get_value(data, "StartSymbol")
    if isinstance(val, str) and val:
        settings.start_symbol = val

    val = _get_value(data, "Title")
    if isinstance(val, str):
        settings.title = val

    return settings


def parse_settings_file(path: str | Path) -> Grammar2HtmlSettings:
    """Parse a settings file.

    Args:
        path: Path to the JSON settings file

    Returns:
        Grammar2HtmlSettings with extracted values
    """
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        return Grammar2HtmlSettings()
    return settings_from_dict(data)
