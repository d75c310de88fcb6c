"""
JSON persistence for name -> WooCommerce ID maps.

The maps are an optimization, never a source of truth: a missing,
unreadable or corrupt file loads as an empty map and a failed write is
logged and dropped. Callers never see an exception from this module.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union

import structlog

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


def _normalize_id_map(raw: dict[str, Any], path: Path) -> dict[str, int]:
    """Keep only entries whose value is an integer ID."""
    out: dict[str, int] = {}
    skipped = 0
    for key, value in raw.items():
        if isinstance(value, bool):
            skipped += 1
            continue
        try:
            out[str(key)] = int(value)
        except (TypeError, ValueError):
            skipped += 1

    if skipped:
        logger.warning("id_map_entries_skipped", path=str(path), skipped=skipped)
    return out


def load_map(path: PathLike) -> dict[str, int]:
    """
    Load a name -> ID map from disk.

    Args:
        path: JSON file holding a flat {"name": id} object

    Returns:
        The map, or {} when the file is missing or unusable
    """
    target = Path(path)

    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.info("id_map_not_found", path=str(target))
        return {}
    except (OSError, ValueError) as e:
        logger.error(
            "id_map_load_failed",
            path=str(target),
            error=str(e),
            error_type=type(e).__name__
        )
        return {}

    if not isinstance(payload, dict):
        logger.error(
            "id_map_load_failed",
            path=str(target),
            error="expected a JSON object",
            error_type=type(payload).__name__
        )
        return {}

    mapping = _normalize_id_map(payload, target)
    logger.info("id_map_loaded", path=str(target), entries=len(mapping))
    return mapping


def save_map(path: PathLike, mapping: dict[str, int]) -> bool:
    """
    Write a name -> ID map to disk.

    The file is written to a temp sibling and renamed into place.

    Returns:
        True if the map was written, False if the write failed
    """
    target = Path(path)
    tmp_name = None

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(mapping, indent=2, ensure_ascii=False)

        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(data)
        os.replace(tmp_name, target)
        tmp_name = None

    except (OSError, TypeError, ValueError) as e:
        logger.error(
            "id_map_save_failed",
            path=str(target),
            error=str(e),
            error_type=type(e).__name__
        )
        return False

    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass

    logger.info("id_map_saved", path=str(target), entries=len(mapping))
    return True
