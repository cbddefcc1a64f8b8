from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Set

from pydantic import ValidationError

from ..errors import ManifestError
from ..utils.filesystem import read_json, write_json
from .models import DetailRecord, DetailStore, PosterRecord


def load_manifest(path: Path) -> List[PosterRecord]:
    """
    Strict read: a stage cannot start from a manifest it does not trust.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {path}") from e
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestError(f"Manifest unreadable: {path} | {e}") from e

    if not isinstance(raw, list):
        raise ManifestError(f"Manifest must be a JSON array: {path}")

    try:
        records = [PosterRecord.model_validate(item) for item in raw]
    except ValidationError as e:
        raise ManifestError(f"Manifest has invalid records: {path} | {e}") from e

    # Two entries sharing a file would let dedupe delete the survivor's image
    ids: Set[int] = set()
    files: Set[str] = set()
    for r in records:
        if r.id in ids:
            raise ManifestError(f"Manifest repeats id {r.id}: {path}")
        if r.file in files:
            raise ManifestError(f"Manifest repeats file {r.file}: {path}")
        ids.add(r.id)
        files.add(r.file)
    return records


def save_manifest(path: Path, records: Iterable[PosterRecord]) -> None:
    write_json(path, [r.to_json() for r in records])


def load_details(path: Path) -> DetailStore:
    """
    Read side of the detail store for consumers such as the gallery.
    Missing or malformed stores read as empty; enrich always rewrites them.
    """
    data = read_json(path, default={})
    if not isinstance(data, dict):
        return {}

    store: DetailStore = {}
    for key, value in data.items():
        if not isinstance(value, dict):
            continue
        try:
            store[str(key)] = DetailRecord.model_validate(value)
        except ValidationError:
            continue
    return store


def save_details(path: Path, store: DetailStore) -> None:
    write_json(path, {key: rec.to_json() for key, rec in store.items()})
