from typing import MutableMapping, Optional

from loguru import logger

THEME_KEY = "explorer-theme"
DARK = "dark"
LIGHT = "light"
DEFAULT_THEME = DARK
THEMES = (DARK, LIGHT)
THEME_ICONS = {DARK: "\N{CRESCENT MOON}", LIGHT: "\N{BLACK SUN WITH RAYS}\N{VARIATION SELECTOR-16}"}


class ThemePreference:
    """Light/dark preference persisted in a key-value store.

    The store is whatever the caller keeps between visits: the cookie jar in
    the web UI, a plain dict in tests.
    """

    def __init__(self, store: Optional[MutableMapping[str, str]] = None) -> None:
        self.store = store if store is not None else {}

    @property
    def current(self) -> str:
        theme = self.store.get(THEME_KEY)
        if theme not in THEMES:
            if theme is not None:
                logger.debug(f"Ignoring unknown stored theme {theme!r}")
            return DEFAULT_THEME
        return theme

    @property
    def icon(self) -> str:
        return THEME_ICONS[self.current]

    def apply(self, theme: str) -> str:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme {theme!r}, expected one of {THEMES}")
        self.store[THEME_KEY] = theme
        return theme

    def toggle(self) -> str:
        return self.apply(LIGHT if self.current == DARK else DARK)
