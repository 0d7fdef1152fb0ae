"""
Color themes for the dashboard.

A Theme is passed explicitly to every render function; nothing in the
package keeps a "current" theme.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_THEME = "github-dark"


@dataclass(frozen=True)
class Theme:
    """All colors used by the dashboard, as hex strings."""

    name: str

    # Base colors
    background: str
    foreground: str
    subtle: str

    # Accents
    blue: str  # titles, borders
    green: str  # values, approved states
    red: str  # errors, closed pull requests
    yellow: str  # pending states
    purple: str  # merged pull requests
    gray: str  # labels
    dark: str  # muted text

    # Contribution graph, level 0 (none) through 4 (10+)
    contrib_levels: tuple[str, str, str, str, str]

    def level_color(self, level: int) -> str:
        """Color for an intensity level; out-of-range levels use level 0."""
        if 0 <= level < len(self.contrib_levels):
            return self.contrib_levels[level]
        return self.contrib_levels[0]


GITHUB_DARK = Theme(
    name="github-dark",
    background="#0d1117",
    foreground="#c9d1d9",
    subtle="#484f58",
    blue="#58a6ff",
    green="#3fb950",
    red="#f85149",
    yellow="#d29922",
    purple="#8957e5",
    gray="#7d8590",
    dark="#6e7681",
    contrib_levels=("#161b22", "#0e4429", "#006d32", "#26a641", "#39d353"),
)

DRACULA = Theme(
    name="dracula",
    background="#282a36",
    foreground="#f8f8f2",
    subtle="#44475a",
    blue="#8be9fd",
    green="#50fa7b",
    red="#ff5555",
    yellow="#f1fa8c",
    purple="#bd93f9",
    gray="#6272a4",
    dark="#44475a",
    # Purple scale
    contrib_levels=("#282a36", "#44355b", "#6d4a9e", "#9d6fc9", "#bd93f9"),
)

NORD = Theme(
    name="nord",
    background="#2e3440",
    foreground="#eceff4",
    subtle="#4c566a",
    blue="#88c0d0",
    green="#a3be8c",
    red="#bf616a",
    yellow="#ebcb8b",
    purple="#b48ead",
    gray="#616e88",
    dark="#4c566a",
    # Frost scale
    contrib_levels=("#2e3440", "#46586a", "#5e7a94", "#81a1c1", "#88c0d0"),
)

# Cycling order
THEMES = {theme.name: theme for theme in (GITHUB_DARK, DRACULA, NORD)}


def get_theme(name: str | None) -> Theme:
    """Look up a theme by name, falling back to the default."""
    if not name:
        return THEMES[DEFAULT_THEME]
    theme = THEMES.get(name)
    if theme is None:
        logger.warning("Unknown theme %r, using %s", name, DEFAULT_THEME)
        return THEMES[DEFAULT_THEME]
    return theme


def next_theme_name(name: str) -> str:
    """Return the theme after `name` in cycling order."""
    names = list(THEMES)
    if name not in names:
        return DEFAULT_THEME
    return names[(names.index(name) + 1) % len(names)]
