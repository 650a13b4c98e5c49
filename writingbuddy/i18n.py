from __future__ import annotations

import json
import os
from typing import Dict, Mapping, Optional

from .config.resources import read_locale_text

DEFAULT_LANGUAGE = "en-US"
AVAILABLE_LANGUAGES = ("en-US", "de")
LOCALE_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")


def _requested_from_env(environ: Mapping[str, str]) -> str:
    for name in LOCALE_ENV_VARS:
        value = environ.get(name, "").strip()
        if value and value not in {"C", "POSIX"}:
            return value
    return DEFAULT_LANGUAGE


def negotiate_language(requested: Optional[str], environ: Optional[Mapping[str, str]] = None) -> str:
    """Map a locale such as ``de_CH.UTF-8`` onto an available catalogue."""
    if not requested or requested.strip().lower() == "auto":
        requested = _requested_from_env(os.environ if environ is None else environ)
    tag = requested.split(".", 1)[0].split("@", 1)[0].replace("_", "-").lower()
    for language in AVAILABLE_LANGUAGES:
        if tag == language.lower():
            return language
    primary = tag.split("-", 1)[0]
    for language in AVAILABLE_LANGUAGES:
        if primary == language.split("-", 1)[0].lower():
            return language
    return DEFAULT_LANGUAGE


def load_catalogue(language: str) -> Dict[str, str]:
    raw = read_locale_text(language)
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}


class Translator:
    """Looks up UI messages, falling back to English and then to the key."""

    def __init__(self, language: str = DEFAULT_LANGUAGE) -> None:
        self.language = language
        self._messages = load_catalogue(language)
        self._fallback = (
            self._messages if language == DEFAULT_LANGUAGE else load_catalogue(DEFAULT_LANGUAGE)
        )

    @classmethod
    def for_request(cls, requested: Optional[str]) -> "Translator":
        return cls(negotiate_language(requested))

    def get(self, key: str) -> str:
        if key in self._messages:
            return self._messages[key]
        return self._fallback.get(key, key)
