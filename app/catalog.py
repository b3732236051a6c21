from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import json
import sys
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

PROJECT_ROOT = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parents[1]))

DEFAULT_POSTERS = [
    {
        "name": "Dandadan",
        "url": "https://libremdb.iket.me/_next/image?url=https%3A%2F%2Fm.media-amazon.com%2Fimages%2FM%2FMV5BMmE4NGI0NWUtOGFmNS00Yzk4LWFjYWYtYjU2MTAxYTMxMGQ5XkEyXkFqcGc%40.UX600.jpg&w=640&q=75",
    },
    {
        "name": "Chainsaw Man",
        "url": "https://libremdb.iket.me/_next/image?url=https%3A%2F%2Fm.media-amazon.com%2Fimages%2FM%2FMV5BN2U3ZGUzYzEtNWYwMi00MDI1LWIyYTgtYjM1NGY5MmMzOWI4XkEyXkFqcGc%40.UX600.jpg&w=640&q=75",
    },
    {
        "name": "Jujutsu Kaisen",
        "url": "https://libremdb.iket.me/_next/image?url=https%3A%2F%2Fm.media-amazon.com%2Fimages%2FM%2FMV5BM2Q1NDI4ZjItOTkzNC00YzI2LTk0ODgtMTk2MjJhMjNjMjM0XkEyXkFqcGc%40.UX600.jpg&w=640&q=75",
    },
    {
        "name": "Frieren",
        "url": "https://libremdb.iket.me/_next/image?url=https%3A%2F%2Fm.media-amazon.com%2Fimages%2FM%2FMV5BZTI4ZGMxN2UtODlkYS00MTBjLWE1YzctYzc3NDViMGI0ZmJmXkEyXkFqcGc%40.UX600.jpg&w=640&q=75",
    },
    {
        "name": "Attack on Titan",
        "url": "https://libremdb.iket.me/_next/image?url=https%3A%2F%2Fm.media-amazon.com%2Fimages%2FM%2FMV5BNjY4MDQxZTItM2JjMi00NjM5LTk0MWYtOTBlNTY2YjBiNmFjXkEyXkFqcGc%40.UX600.jpg&w=384&q=75",
    },
    {
        "name": "Fullmetal Alchemist",
        "url": "https://ih1.redbubble.net/image.597868371.1720/flat,750x,075,f-pad,750x1000,f8f8f8.u3.jpg",
    },
    {
        "name": "Vinland Saga",
        "url": "https://m.media-amazon.com/images/M/MV5BNDA3MGNmZTEtMzFiMy00ZmViLThhNmQtMjQ4ZDc5MDEyN2U1XkEyXkFqcGc@._V1_FMjpg_UX1000_.jpg",
    },
    {
        "name": "Berserk",
        "url": "https://m.media-amazon.com/images/M/MV5BZmE1YTFlZWMtYzRkYi00MWU0LWIwODctZmYzMDExZGRkM2NmXkEyXkFqcGc@._V1_FMjpg_UX1000_.jpg",
    },
    {
        "name": "Hunter x Hunter",
        "url": "https://staticg.sportskeeda.com/editor/2022/10/d8581-16663316932144-1920.jpg",
    },
    {
        "name": "Mob Psycho 100",
        "url": "https://i.redd.it/76ejdm88qg991.jpg",
    },
    # Error-path entries.
    {"name": "Bad URL", "url": "badURL"},
    {"name": "null URL", "url": None},
    {"name": "URL to an HTML page", "url": "https://www.google.com"},
    {"name": "Empty URL", "url": ""},
]

DEFAULT_CONFIG = {
    "window": {"width": 800, "height": 400},
    "debug": True,
    "log_level": "INFO",
    "posters": None,
}


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    url: Optional[str]

    @property
    def display_name(self) -> str:
        return self.name


def load_config(config_path: Path) -> Dict:
    if config_path.exists():
        try:
            with config_path.open("r", encoding="utf-8") as handle:
                loaded = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Ignoring unreadable config {config_path}: {exc}")
            return _merge_default_config({})
        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring config {config_path}: top level is not an object")
            return _merge_default_config({})
        return _merge_default_config(loaded)
    return _merge_default_config({})


def save_config(config_path: Path, config: Dict) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as handle:
        json.dump(config, handle, indent=2)


def load_catalog(config: Optional[Dict] = None) -> Tuple[CatalogEntry, ...]:
    """Build the ordered poster catalog.

    A ``posters`` list in the config replaces the built-in catalog. Entries
    without a usable name are skipped; ``url`` may be null.
    """
    posters = (config or {}).get("posters")
    if posters is None:
        posters = DEFAULT_POSTERS
    entries = tuple(_iter_entries(posters))
    if not entries:
        logger.warning("Configured poster list is empty, using the built-in catalog")
        entries = tuple(_iter_entries(DEFAULT_POSTERS))
    return entries


def catalog_names(entries: Iterable[CatalogEntry]) -> List[str]:
    return [entry.display_name for entry in entries]


def _iter_entries(posters: Iterable) -> Iterable[CatalogEntry]:
    for raw in posters:
        if not isinstance(raw, dict):
            logger.warning(f"Skipping poster entry {raw!r}: not an object")
            continue
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            logger.warning(f"Skipping poster entry {raw!r}: missing name")
            continue
        url = raw.get("url")
        if url is not None and not isinstance(url, str):
            logger.warning(f"Poster entry {name!r}: url {url!r} is not a string")
            url = str(url)
        yield CatalogEntry(name=name.strip(), url=url)


def _merge_default_config(loaded: Dict) -> Dict:
    merged = DEFAULT_CONFIG.copy()
    merged.update(loaded)

    window = dict(DEFAULT_CONFIG["window"])
    loaded_window = loaded.get("window")
    if isinstance(loaded_window, dict):
        for key in ("width", "height"):
            value = loaded_window.get(key)
            if isinstance(value, (int, float)) and value > 0:
                window[key] = int(value)
    merged["window"] = window

    if not isinstance(merged.get("debug"), bool):
        merged["debug"] = DEFAULT_CONFIG["debug"]
    level = merged.get("log_level")
    if not isinstance(level, str) or not level.strip():
        level = DEFAULT_CONFIG["log_level"]
    merged["log_level"] = level.strip().upper()

    posters = merged.get("posters")
    if posters is not None and not isinstance(posters, list):
        logger.warning("Ignoring 'posters' config value: expected a list")
        merged["posters"] = None
    return merged
