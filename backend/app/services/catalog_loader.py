import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from app.config import settings
from app.schemas.catalog import CatalogCardOut

logger = logging.getLogger(__name__)

_catalog: dict[str, CatalogCardOut] = {}
_last_fingerprint: str = ""


def _compute_fingerprint() -> str:
    """Fingerprint the catalog file by size and mtime."""
    path = Path(settings.catalog_path)
    try:
        st = os.stat(path)
    except OSError:
        return ""
    return f"{st.st_size}:{st.st_mtime}"


def _read_entries(path: Path) -> list[dict]:
    with open(path) as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return []
    entries = data.get("cards", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ValueError("catalog must be a list of cards or a mapping with a 'cards' list")
    return entries


def load_catalog() -> None:
    """Load card presets from the catalog YAML file.

    Builds a new dict locally and swaps the global so readers never see a
    half-loaded catalog.
    """
    global _catalog, _last_fingerprint

    new_catalog: dict[str, CatalogCardOut] = {}
    path = Path(settings.catalog_path)
    if not path.exists():
        logger.warning("Card catalog %s not found; catalog is empty", path)
        _catalog = new_catalog
        _last_fingerprint = ""
        return

    try:
        entries = _read_entries(path)
    except (OSError, yaml.YAMLError, ValueError) as exc:
        logger.warning("Failed to read card catalog %s: %s", path, exc)
        # Keep serving the previous catalog until the file changes again
        _last_fingerprint = _compute_fingerprint()
        return

    for entry in entries:
        preset_id = entry.get("id") if isinstance(entry, dict) else None
        if not preset_id:
            logger.warning("Skipping catalog entry without an id: %r", entry)
            continue
        if not isinstance(preset_id, str):
            logger.warning("Skipping catalog entry with a non-string id: %r", preset_id)
            continue
        if preset_id in new_catalog:
            logger.warning("Skipping duplicate catalog entry %s", preset_id)
            continue
        try:
            new_catalog[preset_id] = CatalogCardOut.model_validate(entry)
        except ValidationError as exc:
            logger.warning("Skipping catalog entry %s: validation error: %s", preset_id, exc)
            continue

    _catalog = new_catalog
    _last_fingerprint = _compute_fingerprint()
    logger.info("Loaded %d catalog cards from %s", len(new_catalog), path)


def reload_if_changed() -> bool:
    """Reload the catalog if the file has changed.

    Returns True if the catalog was reloaded.
    """
    fp = _compute_fingerprint()
    if fp == _last_fingerprint:
        return False
    logger.info("Card catalog changed, reloading...")
    load_catalog()
    return True


def get_catalog() -> list[CatalogCardOut]:
    return list(_catalog.values())


def get_preset(preset_id: str) -> CatalogCardOut | None:
    return _catalog.get(preset_id)
