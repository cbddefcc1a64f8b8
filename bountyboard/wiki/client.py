from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from ..config.settings import settings
from ..errors import WikiApiError


def wiki_session(user_agent: Optional[str] = None) -> requests.Session:
    s = requests.Session()
    s.headers.update({"User-Agent": user_agent or settings.downloader_user_agent})
    return s


def wiki_api(
    params: Dict[str, Any],
    session: Optional[requests.Session] = None,
    api_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    One blocking GET against the MediaWiki api.php endpoint.
    Anything other than a 2xx JSON object raises WikiApiError.
    """
    s = session or wiki_session()
    url = api_url or settings.api_url

    try:
        r = s.get(url, params=params, timeout=settings.http_timeout)
    except requests.RequestException as e:
        raise WikiApiError(f"Request failed: {url} | {e}") from e

    if not r.ok:
        raise WikiApiError(
            f"Failed request: {r.status_code} {r.reason}", status_code=r.status_code
        )

    try:
        data = r.json()
    except ValueError as e:
        raise WikiApiError(f"Response is not JSON: {url}") from e

    if not isinstance(data, dict):
        raise WikiApiError(f"Unexpected response shape from {url}")
    return data
