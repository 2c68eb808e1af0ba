from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple, Optional

from reportlab.lib import colors

from ..config import DEFAULT_ACCENT, DEFAULT_BACKGROUND, DEFAULT_PRIMARY


_HEX_PATTERN = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


class RGB(NamedTuple):
    r: int
    g: int
    b: int


FALLBACK_RGB = RGB(176, 38, 255)


def hex_to_rgb(value: Any) -> RGB:
    """
    Parse "#RRGGBB" / "RRGGBB" into an RGB triple.

    Never raises: anything that is not six hex digits resolves to the
    default primary purple so a bad customization cannot break a render.
    """
    if not isinstance(value, str):
        return FALLBACK_RGB
    match = _HEX_PATTERN.match(value.strip())
    if match is None:
        return FALLBACK_RGB
    return RGB(*(int(part, 16) for part in match.groups()))


def normalize_hex(value: Any) -> Optional[str]:
    """Return "#RRGGBB" for a well-formed hex colour, None for anything else."""
    if not isinstance(value, str):
        return None
    match = _HEX_PATTERN.match(value.strip())
    if match is None:
        return None
    return "#" + "".join(match.groups())


def rgb_color(value: Any) -> colors.Color:
    r, g, b = hex_to_rgb(value)
    return colors.Color(r / 255.0, g / 255.0, b / 255.0)


@dataclass(frozen=True)
class ColorTheme:
    primary: str = DEFAULT_PRIMARY
    accent: str = DEFAULT_ACCENT
    background: str = DEFAULT_BACKGROUND

    @property
    def primary_rgb(self) -> RGB:
        return hex_to_rgb(self.primary)


def resolve_theme(customizations: Optional[Mapping[str, Any]] = None) -> ColorTheme:
    # stored portfolios nest the palette under "colors"; direct callers may pass it flat
    source: Mapping[str, Any] = customizations or {}
    nested = source.get("colors")
    if isinstance(nested, Mapping):
        source = nested

    def _pick(key: str, default: str) -> str:
        return normalize_hex(source.get(key)) or default

    return ColorTheme(
        primary=_pick("primary", DEFAULT_PRIMARY),
        accent=_pick("accent", DEFAULT_ACCENT),
        background=_pick("background", DEFAULT_BACKGROUND),
    )
