from __future__ import annotations

from importlib import resources
from importlib.abc import Traversable
from typing import Optional

RESOURCES_DIR = "resources"
LOCALES_DIR = "locales"
DEFAULT_CONFIG_NAME = "writingbuddy_default.json"


def resource_path(*parts: str) -> Optional[Traversable]:
    try:
        data = resources.files("writingbuddy")
    except ModuleNotFoundError:
        return None
    for part in parts:
        data = data.joinpath(part)
    return data


def read_text(*parts: str) -> str:
    data = resource_path(*parts)
    if not data:
        return ""
    try:
        return data.read_text(encoding="utf-8")
    except OSError:
        return ""


def read_config_text(name: str = DEFAULT_CONFIG_NAME) -> str:
    return read_text(RESOURCES_DIR, name)


def read_locale_text(language: str) -> str:
    return read_text(RESOURCES_DIR, LOCALES_DIR, f"{language}.json")
