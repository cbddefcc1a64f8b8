from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Set

import requests

from ..config.settings import settings
from ..utils.logger import get_logger
from ..utils.slug import (
    display_name,
    sanitize_filename,
    split_extension,
    strip_namespace,
    url_extension,
)
from ..wiki.client import wiki_api
from .models import PosterRecord

log = get_logger("catalog")

DEFAULT_EXTENSION = ".jpg"
PAGE_LIMIT = 500
FILE_NAMESPACE_ID = 6


@dataclass
class RawPoster:
    """A listed file before filename collisions are resolved."""

    id: int
    title: str
    name: str
    base: str
    extension: str
    image_url: str
    width: Optional[int] = None
    height: Optional[int] = None


def _category_pages(
    session: Optional[requests.Session], api_url: Optional[str], category: str
) -> Iterator[Dict[str, Any]]:
    """
    Yield every page object of the category, following gcmcontinue.
    Any upstream failure propagates as WikiApiError.
    """
    cont: Optional[str] = None
    batch = 0
    while True:
        params: Dict[str, Any] = {
            "action": "query",
            "format": "json",
            "generator": "categorymembers",
            "gcmtitle": category,
            "gcmnamespace": str(FILE_NAMESPACE_ID),
            "gcmlimit": str(PAGE_LIMIT),
            "prop": "imageinfo",
            "iiprop": "url|size|mime",
        }
        if cont:
            params["gcmcontinue"] = cont

        data = wiki_api(params, session=session, api_url=api_url)
        batch += 1
        pages = (data.get("query") or {}).get("pages") or {}
        if isinstance(pages, dict):
            pages = list(pages.values())
        log.debug(f"Category batch {batch}: {len(pages)} pages")

        for page in pages:
            if isinstance(page, dict):
                yield page

        cont = (data.get("continue") or {}).get("gcmcontinue")
        if not cont:
            return


def _to_raw_poster(page: Dict[str, Any]) -> Optional[RawPoster]:
    infos = page.get("imageinfo") or []
    info = infos[0] if infos and isinstance(infos[0], dict) else {}
    url = info.get("url")
    pageid = page.get("pageid")
    title = page.get("title")
    if not url or pageid is None or not title:
        return None

    pageid = int(pageid)
    original_title = strip_namespace(str(title))
    stem, ext = split_extension(original_title)
    extension = ext or url_extension(url) or DEFAULT_EXTENSION
    base = sanitize_filename(stem) or f"poster_{pageid}"

    return RawPoster(
        id=pageid,
        title=original_title,
        name=display_name(original_title),
        base=base,
        extension=extension,
        image_url=url,
        width=info.get("width"),
        height=info.get("height"),
    )


def resolve_filenames(raw: List[RawPoster]) -> List[PosterRecord]:
    """
    First (base, ext) occurrence keeps the bare name, later ones get the
    page id appended. Order of `raw` decides who is first.
    """
    seen: Counter = Counter()
    taken: Set[str] = set()
    out: List[PosterRecord] = []

    for p in raw:
        key = (p.base, p.extension)
        count = seen[key]
        seen[key] += 1

        file = f"{p.base}{p.extension}" if count == 0 else f"{p.base}_{p.id}{p.extension}"
        n = 1
        while file in taken:
            # "Luffy_12.jpg" may already exist as a real title
            n += 1
            file = f"{p.base}_{p.id}_{n}{p.extension}"
        taken.add(file)

        out.append(
            PosterRecord(
                id=p.id,
                title=p.title,
                name=p.name,
                file=file,
                image_url=p.image_url,
                width=p.width,
                height=p.height,
            )
        )
    return out


def manifest_sort_key(record: PosterRecord):
    return (record.name.casefold(), record.name, record.id)


def discover(
    session: Optional[requests.Session] = None,
    *,
    api_url: Optional[str] = None,
    category: Optional[str] = None,
) -> List[PosterRecord]:
    """
    Enumerate the whole poster category.

    The returned order is the manifest order, and the duplicate reducer keeps
    the first of any identical images in that order.
    """
    category = category or settings.category
    raw: List[RawPoster] = []
    ids: Set[int] = set()

    for page in _category_pages(session, api_url, category):
        poster = _to_raw_poster(page)
        if poster is None:
            continue
        if poster.id in ids:
            continue
        ids.add(poster.id)
        raw.append(poster)

    records = resolve_filenames(raw)
    records.sort(key=manifest_sort_key)
    log.info(f"Discovered {len(records)} posters in {category}")
    return records
