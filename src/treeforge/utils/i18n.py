from __future__ import annotations

"""
Translation Catalog.

Loads user-facing strings from JSON locale files shipped with the interface
package and resolves them by dotted key ('gui.buttons.parse'). Unknown keys
resolve to themselves so a missing translation never breaks the UI.
"""

import json
import logging
import os
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
LOCALES_DIR = os.path.abspath(
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "interface", "locales")
)


class I18n:
    """Catalog of translations for one active locale."""

    def __init__(self, locale: str = DEFAULT_LOCALE, locales_dir: str = LOCALES_DIR):
        self._locales_dir = locales_dir
        self._locale = locale
        self._catalog: Dict[str, Any] = {}
        self.is_loaded = False
        self.load_locale(locale)

    @property
    def locale(self) -> str:
        return self._locale

    def available_locales(self) -> List[str]:
        if not os.path.isdir(self._locales_dir):
            return []
        return sorted(
            os.path.splitext(name)[0]
            for name in os.listdir(self._locales_dir)
            if name.endswith(".json")
        )

    def load_locale(self, locale: str) -> bool:
        """
        Switch the active catalog.

        Args:
            locale: Locale identifier matching a '<locale>.json' file.

        Returns:
            bool: True when the catalog was loaded. On failure the previous
                  catalog is dropped and lookups fall back to keys.
        """
        file_path = os.path.join(self._locales_dir, f"{locale}.json")
        if not os.path.exists(file_path):
            logger.warning(f"I18n: locale file not found '{file_path}'.")
            self._catalog = {}
            self.is_loaded = False
            return False

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"I18n: cannot read locale file '{file_path}': {e}")
            self._catalog = {}
            self.is_loaded = False
            return False

        self._catalog = data if isinstance(data, dict) else {}
        self._locale = locale
        self.is_loaded = bool(self._catalog)
        logger.debug(f"I18n: locale '{locale}' loaded.")
        return self.is_loaded

    def has(self, key: str) -> bool:
        return isinstance(self._lookup(key), str)

    def t(self, key: str, **kwargs: Any) -> str:
        """
        Resolve a dotted key and interpolate keyword arguments.

        Returns:
            str: The translated text, or the key itself when it cannot be
                 resolved or formatted.
        """
        value = self._lookup(key)
        if not isinstance(value, str):
            return key
        if not kwargs:
            return value
        try:
            return value.format(**kwargs)
        except (KeyError, IndexError, ValueError) as e:
            logger.debug(f"I18n: formatting failed for '{key}': {e}")
            return key

    def _lookup(self, key: str) -> Any:
        current: Any = self._catalog
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
        return current


# Application-wide catalog
i18n = I18n(DEFAULT_LOCALE)
