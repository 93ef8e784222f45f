"""Bundled Textual themes for the channel guide."""
from __future__ import annotations

from typing import Mapping

from textual.theme import Theme

__all__ = [
    "CUSTOM_THEMES",
    "DEFAULT_THEME_NAME",
]

# Brand accent used by the web guide for the loading spinner and favorites.
_GUIDE_PINK = "#E6007D"
_GUIDE_BLUE = "#3182CE"
_GUIDE_BLUE_DARK = "#2B6CB0"
_GUIDE_GRAY_100 = "#EDF2F7"
_GUIDE_GRAY_200 = "#E2E8F0"
_GUIDE_GRAY_500 = "#718096"
_GUIDE_GRAY_800 = "#1A202C"
_GUIDE_GRAY_900 = "#171923"
_GUIDE_NEAR_BLACK = "#0D0E12"
_GUIDE_GREEN = "#38A169"
_GUIDE_YELLOW = "#D69E2E"
_GUIDE_RED = "#E53E3E"

_GUIDE_NIGHT = Theme(
    "guide-night",
    primary=_GUIDE_BLUE,
    secondary=_GUIDE_GRAY_500,
    warning=_GUIDE_YELLOW,
    error=_GUIDE_RED,
    success=_GUIDE_GREEN,
    accent=_GUIDE_PINK,
    foreground=_GUIDE_GRAY_200,
    background=_GUIDE_NEAR_BLACK,
    surface=_GUIDE_GRAY_900,
    panel=_GUIDE_GRAY_800,
    dark=True,
)

_GUIDE_DAY = Theme(
    "guide-day",
    primary=_GUIDE_BLUE_DARK,
    secondary=_GUIDE_GRAY_500,
    warning=_GUIDE_YELLOW,
    error=_GUIDE_RED,
    success=_GUIDE_GREEN,
    accent=_GUIDE_PINK,
    foreground=_GUIDE_GRAY_800,
    background="#FFFFFF",
    surface=_GUIDE_GRAY_100,
    panel=_GUIDE_GRAY_200,
    dark=False,
)

CUSTOM_THEMES: Mapping[str, Theme] = {
    _GUIDE_NIGHT.name: _GUIDE_NIGHT,
    _GUIDE_DAY.name: _GUIDE_DAY,
}
"""Themes bundled with the application keyed by their names."""

DEFAULT_THEME_NAME = _GUIDE_NIGHT.name
"""Theme applied when none is requested."""
