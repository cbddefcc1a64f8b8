from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import requests

from ..config.settings import settings
from ..errors import WikiApiError
from ..utils.filesystem import file_exists
from ..utils.logger import get_logger
from ..wiki.client import wiki_session
from .catalog import discover
from .manifest import save_manifest
from .models import DownloadStats, PosterRecord

log = get_logger("downloader")


def download_file(
    url: str,
    out_path: Path,
    session: Optional[requests.Session] = None,
    timeout: Optional[int] = None,
) -> None:
    """
    Single attempt, no retry. The body lands in `<name>.part` first so an
    interrupted write never looks like a finished image.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    s = session or wiki_session()

    with s.get(url, stream=True, timeout=timeout or settings.http_timeout) as r:
        if not r.ok:
            raise WikiApiError(
                f"Failed download: {r.status_code} {r.reason} | {url}",
                status_code=r.status_code,
            )

        tmp = out_path.with_suffix(out_path.suffix + ".part")
        try:
            with open(tmp, "wb") as f:
                for chunk in r.iter_content(chunk_size=1024 * 256):
                    if chunk:
                        f.write(chunk)
            os.replace(tmp, out_path)
        finally:
            if tmp.exists():
                tmp.unlink()


def download_posters(
    catalog: Sequence[PosterRecord],
    posters_dir: Path,
    manifest_file: Path,
    session: Optional[requests.Session] = None,
    delay: Optional[float] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> Tuple[List[PosterRecord], DownloadStats]:
    """
    Fetch every poster that is not on disk yet, then write the manifest.
    Failed downloads stay in the manifest; the next run picks them up.
    """
    delay = settings.download_delay if delay is None else delay
    sleep = sleep or time.sleep
    s = session or wiki_session(settings.downloader_user_agent)
    posters_dir.mkdir(parents=True, exist_ok=True)

    manifest = list(catalog)
    stats = DownloadStats(total=len(manifest))

    for record in manifest:
        destination = posters_dir / record.file
        if file_exists(destination):
            stats.skipped += 1
            continue

        try:
            download_file(record.image_url, destination, session=s)
            stats.downloaded += 1
        except (WikiApiError, requests.RequestException, OSError) as e:
            stats.failed += 1
            log.warning(f"Download failed for {record.file}: {e}")
        finally:
            sleep(delay)

    save_manifest(manifest_file, manifest)
    return manifest, stats


def run_download(
    posters_dir: Optional[Path] = None,
    manifest_file: Optional[Path] = None,
    session: Optional[requests.Session] = None,
) -> DownloadStats:
    settings.ensure_dirs()
    posters_dir = posters_dir or settings.posters_dir
    manifest_file = manifest_file or settings.manifest_file
    s = session or wiki_session(settings.downloader_user_agent)

    catalog = discover(s)
    _, stats = download_posters(catalog, posters_dir, manifest_file, session=s)

    print(stats.summary())
    print(f"Images stored in {posters_dir}")
    print(f"Data written to {manifest_file}")
    return stats
