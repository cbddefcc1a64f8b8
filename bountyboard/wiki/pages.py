from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from ..details.infobox import parse_infoboxes
from ..utils.slug import FILE_NAMESPACE
from .client import wiki_api

MAIN_NAMESPACE = 0
FILE_USAGE_LIMIT = 50


def _first_page(data: Dict[str, Any]) -> Dict[str, Any]:
    # formatversion=2 returns pages as a list
    pages = (data.get("query") or {}).get("pages") or []
    if isinstance(pages, dict):
        pages = list(pages.values())
    page = pages[0] if pages else {}
    return page if isinstance(page, dict) else {}


def get_file_usage(
    file_title: str,
    session: Optional[requests.Session] = None,
    api_url: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Pages that embed the given file.
    """
    title = file_title if file_title.startswith(FILE_NAMESPACE) else f"{FILE_NAMESPACE}{file_title}"
    data = wiki_api(
        {
            "action": "query",
            "format": "json",
            "formatversion": "2",
            "titles": title,
            "prop": "fileusage",
            "fuprop": "title|pageid|ns",
            "fulimit": str(FILE_USAGE_LIMIT),
        },
        session=session,
        api_url=api_url,
    )
    usages = _first_page(data).get("fileusage") or []
    return [u for u in usages if isinstance(u, dict)]


def pick_usage_title(usages: List[Dict[str, Any]]) -> Optional[str]:
    """
    Character articles live in the main namespace; category and gallery
    pages that reuse the poster are only a fallback.
    """
    if not usages:
        return None
    main = next((u for u in usages if u.get("ns") == MAIN_NAMESPACE), None)
    return (main or usages[0]).get("title") or None


def get_infoboxes(
    title: str,
    session: Optional[requests.Session] = None,
    api_url: Optional[str] = None,
) -> Optional[List[Any]]:
    data = wiki_api(
        {
            "action": "query",
            "format": "json",
            "formatversion": "2",
            "prop": "pageprops",
            "titles": title,
        },
        session=session,
        api_url=api_url,
    )
    pageprops = _first_page(data).get("pageprops")
    if not isinstance(pageprops, dict):
        return None
    return parse_infoboxes(pageprops.get("infoboxes"))
