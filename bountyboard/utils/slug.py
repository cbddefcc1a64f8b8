from __future__ import annotations

import re
import unicodedata
from typing import Tuple
from urllib.parse import urlparse

FILE_NAMESPACE = "File:"

# Extensions are alphanumeric; "Monkey D. Luffy" has none.
_EXT_RE = re.compile(r"\.[A-Za-z0-9]+$")
_ILLEGAL_RE = re.compile(r'[\\/:*?"<>|]')


def strip_namespace(title: str) -> str:
    if title.startswith(FILE_NAMESPACE):
        return title[len(FILE_NAMESPACE):]
    return title


def split_extension(title: str) -> Tuple[str, str]:
    """
    "Monkey D. Luffy.png" -> ("Monkey D. Luffy", ".png")
    "README" -> ("README", "")
    """
    m = _EXT_RE.search(title)
    if not m or m.start() == 0:
        return title, ""
    return title[: m.start()], m.group(0)


def url_extension(url: str) -> str:
    path = urlparse(url).path
    name = path.rsplit("/", 1)[-1]
    return split_extension(name)[1]


def sanitize_filename(value: str) -> str:
    s = unicodedata.normalize("NFKD", value)
    s = s.encode("ascii", "ignore").decode("ascii")
    s = _ILLEGAL_RE.sub("", s)
    s = re.sub(r"\s+", "_", s)
    s = re.sub(r"_+", "_", s)
    return s.strip("_")


def display_name(title: str) -> str:
    base, _ = split_extension(title)
    s = base.replace("_", " ")
    s = re.sub(r"\s+", " ", s)
    return s.strip()
