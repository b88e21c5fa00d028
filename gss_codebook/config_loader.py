"""Load source configuration from config/sources.yaml."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from gss_codebook.errors import ConfigError

# Project root: assume this file is in gss_codebook/
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SOURCES_PATH = _PROJECT_ROOT / "config" / "sources.yaml"

DEFAULT_CONTAINER_CLASS = "vardesc"
DEFAULT_TABLE_CLASS = "dflt"
DEFAULT_DELAY_SECONDS = 1.0

_SOURCES_CACHE: Optional[List[Dict[str, Any]]] = None


def load_sources_config(path: Optional[Path] = None) -> List[Dict[str, Any]]:
    """Load sources list from config/sources.yaml.

    The default file is cached after the first read; an explicit path is
    always read fresh.
    """
    global _SOURCES_CACHE
    if path is None and _SOURCES_CACHE is not None:
        return _SOURCES_CACHE
    p = path or _SOURCES_PATH
    if not p.exists():
        sources: List[Dict[str, Any]] = []
    else:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        sources = data.get("sources") or []
    if path is None:
        _SOURCES_CACHE = sources
    return sources


def get_source_by_name(name: str, path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the source config dict for the given name.

    Raises:
        ConfigError: If no source with that name is configured or the entry
            lacks a url_pattern.
    """
    for s in load_sources_config(path):
        if s.get("name") == name:
            if not s.get("url_pattern"):
                raise ConfigError(f"Source '{name}' has no url_pattern in {path or _SOURCES_PATH}")
            return s
    known = ", ".join(s.get("name", "?") for s in load_sources_config(path)) or "none"
    raise ConfigError(f"Unknown source '{name}' (configured: {known})")


def get_source_names(path: Optional[Path] = None) -> List[str]:
    """Return the names of all configured sources."""
    return [s["name"] for s in load_sources_config(path) if s.get("name")]


def get_pages_for_source(name: str, path: Optional[Path] = None) -> List[int]:
    """Return the page numbers (first..last inclusive) configured for a source."""
    pages = get_source_by_name(name, path).get("pages") or {}
    try:
        first = int(pages.get("first", 1))
        last = int(pages["last"])
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Source '{name}' needs integer pages.first/pages.last") from e
    if last < first:
        raise ConfigError(f"Source '{name}' has pages.last < pages.first ({last} < {first})")
    return list(range(first, last + 1))


def get_selectors_for_source(name: str, path: Optional[Path] = None) -> Dict[str, str]:
    """Return the container/table marker classes for a source."""
    source = get_source_by_name(name, path)
    return {
        "container_class": source.get("container_class") or DEFAULT_CONTAINER_CLASS,
        "table_class": source.get("table_class") or DEFAULT_TABLE_CLASS,
    }


def source_delay(source: Dict[str, Any]) -> float:
    """Return the fixed delay (seconds) between requests from a source config dict.

    Raises:
        ConfigError: If delay_seconds is not a number.
    """
    raw = source.get("delay_seconds", DEFAULT_DELAY_SECONDS)
    try:
        return max(0.0, float(raw))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Source '{source.get('name', '?')}' has invalid delay_seconds: {raw!r}") from e


def get_delay_for_source(name: str, path: Optional[Path] = None) -> float:
    """Return the fixed delay (seconds) between requests for a source."""
    return source_delay(get_source_by_name(name, path))
