from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PosterRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int  # upstream page id
    title: str  # raw title, "File:" stripped
    name: str  # display name
    file: str  # local filename under the posters dir
    image_url: str = Field(alias="imageUrl")

    # Informational only
    width: Optional[int] = None
    height: Optional[int] = None

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class DetailRecord(BaseModel):
    """
    Sparse character details for one poster.
    A field that is None was not found upstream and is left out on disk.
    """

    model_config = ConfigDict(populate_by_name=True)

    crew: Optional[str] = None
    affiliation: Optional[str] = None
    origin: Optional[str] = None
    role: Optional[str] = None
    bounty: Optional[str] = None
    status: Optional[str] = None
    age: Optional[str] = None
    birthday: Optional[str] = None
    size: Optional[str] = None
    fruit: Optional[str] = None
    first_seen: Optional[str] = Field(default=None, alias="firstSeen")
    matched_name: Optional[str] = Field(default=None, alias="matchedName")
    source_page: Optional[str] = Field(default=None, alias="sourcePage")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# Keyed by str(PosterRecord.id)
DetailStore = Dict[str, DetailRecord]


# ---------------------------------------------------------------------
# RUN COUNTERS
# ---------------------------------------------------------------------


@dataclass
class DownloadStats:
    total: int = 0
    downloaded: int = 0
    skipped: int = 0
    failed: int = 0

    def summary(self) -> str:
        return (
            f"Posters: {self.total} | Downloaded: {self.downloaded} | "
            f"Skipped: {self.skipped} | Failed: {self.failed}"
        )


@dataclass
class DedupeStats:
    kept: int = 0
    duplicates: int = 0
    missing: int = 0
    files_deleted: int = 0
    unreadable: int = 0

    def summary(self) -> str:
        return (
            f"Posters kept: {self.kept} | Duplicates removed: {self.duplicates} | "
            f"Missing files skipped: {self.missing} | Files deleted: {self.files_deleted} | "
            f"Unreadable: {self.unreadable}"
        )


@dataclass
class EnrichStats:
    total: int = 0
    with_infobox: int = 0
    with_fields: int = 0
    failed: int = 0

    def summary(self) -> str:
        return (
            f"Posters: {self.total} | With infobox: {self.with_infobox} | "
            f"With fields: {self.with_fields} | Failed lookups: {self.failed}"
        )
