from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

import requests

from ..config.settings import settings
from ..errors import WikiApiError
from ..posters.manifest import load_manifest, save_details
from ..posters.models import DetailRecord, DetailStore, EnrichStats, PosterRecord
from ..utils.logger import get_logger
from ..wiki.client import wiki_session
from ..wiki.pages import get_file_usage, get_infoboxes, pick_usage_title
from .infobox import extract_fields

log = get_logger("enricher")


def enrich_record(
    record: PosterRecord,
    session: requests.Session,
    delay: float,
    sleep: Callable[[float], None],
    api_url: Optional[str] = None,
) -> Tuple[Optional[str], Optional[dict]]:
    """
    Returns (source page, extracted fields).
    (None, None) → no page uses the file.
    (page, None) → the page has no readable infobox.
    """
    try:
        usages = get_file_usage(record.title, session=session, api_url=api_url)
    finally:
        sleep(delay)

    page = pick_usage_title(usages)
    if not page:
        return None, None

    try:
        infoboxes = get_infoboxes(page, session=session, api_url=api_url)
    finally:
        sleep(delay)

    if infoboxes is None:
        return page, None
    return page, extract_fields(infoboxes)


def enrich(
    records: Sequence[PosterRecord],
    session: Optional[requests.Session] = None,
    delay: Optional[float] = None,
    sleep: Optional[Callable[[float], None]] = None,
    api_url: Optional[str] = None,
) -> Tuple[DetailStore, EnrichStats]:
    """
    Best effort per poster: a lookup failure skips that poster only.
    """
    delay = settings.enrich_delay if delay is None else delay
    sleep = sleep or time.sleep
    s = session or wiki_session(settings.enricher_user_agent)

    store: DetailStore = {}
    stats = EnrichStats(total=len(records))

    for record in records:
        try:
            page, fields = enrich_record(record, s, delay, sleep, api_url=api_url)
        except WikiApiError as e:
            stats.failed += 1
            log.warning(f"Lookup failed for {record.title}: {e}")
            continue

        if page is None:
            log.debug(f"No page uses {record.title}")
            continue
        if fields is None:
            log.debug(f"No infobox on {page} (for {record.title})")
            continue

        stats.with_infobox += 1
        if fields:
            stats.with_fields += 1

        store[str(record.id)] = DetailRecord.model_validate(
            {**fields, "sourcePage": page}
        )

    return store, stats


def run_enrich(
    manifest_file: Optional[Path] = None,
    details_file: Optional[Path] = None,
    session: Optional[requests.Session] = None,
) -> EnrichStats:
    manifest_file = manifest_file or settings.manifest_file
    details_file = details_file or settings.details_file

    records = load_manifest(manifest_file)
    store, stats = enrich(records, session=session)
    save_details(details_file, store)

    print(stats.summary())
    print(f"Details written: {details_file}")
    return stats
