from __future__ import annotations

import hashlib
from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple

from ..config.settings import settings
from ..utils.filesystem import file_exists
from ..utils.logger import get_logger
from .manifest import load_manifest, save_manifest
from .models import DedupeStats, PosterRecord

log = get_logger("dedupe")


def sha256_file(path: Path, chunk: int = 1 << 16) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for b in iter(lambda: f.read(chunk), b""):
            h.update(b)
    return h.hexdigest()


class DuplicateReducer:
    """
    Drops manifest entries whose image bytes were already seen.

    The first record in manifest order wins. Seen digests live on the
    instance and die with it; nothing is persisted between runs.
    """

    def __init__(self, posters_dir: Path) -> None:
        self.posters_dir = posters_dir
        self.seen: Set[str] = set()
        self.files: Set[str] = set()
        self.stats = DedupeStats()

    def keep(self, record: PosterRecord) -> bool:
        if record.file in self.files:
            # Same backing file as a kept record; deleting it would orphan that one
            self.stats.duplicates += 1
            return False

        path = self.posters_dir / record.file
        if not file_exists(path):
            self.stats.missing += 1
            return False

        try:
            digest = sha256_file(path)
        except OSError as e:
            self.stats.unreadable += 1
            log.warning(f"Could not read {path.name}, dropping it: {e}")
            return False

        if digest in self.seen:
            self.stats.duplicates += 1
            self._remove(path)
            return False

        self.seen.add(digest)
        self.files.add(record.file)
        self.stats.kept += 1
        return True

    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
            self.stats.files_deleted += 1
        except OSError as e:
            # Entry is dropped either way
            log.warning(f"Could not delete duplicate {path.name}: {e}")

    def reduce(
        self, records: Sequence[PosterRecord]
    ) -> Tuple[List[PosterRecord], DedupeStats]:
        kept = [r for r in records if self.keep(r)]
        return kept, self.stats


def reduce_manifest(
    records: Sequence[PosterRecord], posters_dir: Path
) -> Tuple[List[PosterRecord], DedupeStats]:
    return DuplicateReducer(posters_dir).reduce(records)


def run_dedupe(
    manifest_file: Optional[Path] = None, posters_dir: Optional[Path] = None
) -> DedupeStats:
    manifest_file = manifest_file or settings.manifest_file
    posters_dir = posters_dir or settings.posters_dir

    records = load_manifest(manifest_file)
    kept, stats = reduce_manifest(records, posters_dir)
    save_manifest(manifest_file, kept)

    print(stats.summary())
    return stats
