"""
Portable-infobox parsing.

Fandom exposes a page's infoboxes as a JSON string in the `infoboxes` page
prop. Each infobox holds a `data` list of typed entries; the ones we read are
`title` (the character name) and `data` (label/value pairs whose values are
small HTML fragments).
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Tuple

# (field, substrings of the normalized label, exact labels)
FIELD_RULES: Tuple[Tuple[str, Tuple[str, ...], Tuple[str, ...]], ...] = (
    ("crew", ("crew",), ()),
    ("affiliation", ("affiliation",), ()),
    ("origin", ("origin", "birthplace"), ()),
    ("role", ("occupation", "job", "role"), ()),
    ("bounty", ("bounty", "reward"), ()),
    ("status", ("status",), ()),
    ("age", ("age",), ()),
    ("birthday", ("birthday",), ()),
    ("size", ("height", "size"), ()),
    ("fruit", ("devil fruit",), ("fruit",)),
    ("firstSeen", ("first appearance", "debut"), ()),
)

# &amp; last so "&amp;lt;" stays a literal "&lt;"
_ENTITIES = (
    ("&nbsp;", " "),
    ("&quot;", '"'),
    ("&#039;", "'"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
)

_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_LIST_ITEM_RE = re.compile(r"</?li(?:\s[^>]*)?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
# Any comma except a bare digit-grouping one ("3,000,000,000")
_SEPARATOR_RE = re.compile(r"\s+,\s*|,\s+|(?<!\d),|,(?!\d)")
_REPEATED_SEPARATOR_RE = re.compile(r",\s*(?:,\s*)+")
_SPLIT_RE = re.compile(r",\s+")


def normalize_label(value: str) -> str:
    s = value.lower()
    s = re.sub(r"&[^;\s]+;", " ", s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    return s.strip()


def clean_html(value: Any) -> Optional[str]:
    """
    "A<br>B<li>C</li>" -> "A, B, C"

    Line breaks and list items become comma separators, other markup is
    dropped. Returns None when nothing readable is left.
    """
    if value is None:
        return None
    text = str(value)
    if not text:
        return None

    text = _BREAK_RE.sub(", ", text)
    text = _LIST_ITEM_RE.sub(", ", text)
    text = _TAG_RE.sub(" ", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)

    text = re.sub(r"\s+", " ", text)
    text = _SEPARATOR_RE.sub(", ", text)
    text = _REPEATED_SEPARATOR_RE.sub(", ", text)
    text = text.strip(" ,")
    return text or None


def merge_field(fields: Dict[str, str], key: str, value: Optional[str]) -> None:
    if not value:
        return
    current = fields.get(key)
    if not current:
        fields[key] = value
        return
    if current == value:
        return

    parts: List[str] = []
    for part in _SPLIT_RE.split(f"{current}, {value}"):
        if part and part not in parts:
            parts.append(part)
    fields[key] = ", ".join(parts)


def fields_for_label(label: str) -> List[str]:
    """All fields a normalized label feeds; one label can feed several."""
    out = []
    for field, contains, exact in FIELD_RULES:
        if any(k in label for k in contains) or label in exact:
            out.append(field)
    return out


def extract_fields(infoboxes: Any) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    if not isinstance(infoboxes, list):
        return fields

    for infobox in infoboxes:
        if not isinstance(infobox, dict):
            continue
        for entry in infobox.get("data") or []:
            if not isinstance(entry, dict):
                continue
            data = entry.get("data")
            if not isinstance(data, dict):
                continue

            kind = entry.get("type")
            if kind == "title":
                merge_field(fields, "matchedName", clean_html(data.get("value")))
                continue
            if kind != "data":
                continue

            label_raw = data.get("label")
            value = clean_html(data.get("value"))
            if not label_raw or not value:
                continue

            for field in fields_for_label(normalize_label(str(label_raw))):
                merge_field(fields, field, value)

    return fields


def parse_infoboxes(raw: Any) -> Optional[List[Any]]:
    if not raw or not isinstance(raw, str):
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, list):
        return None
    return parsed
