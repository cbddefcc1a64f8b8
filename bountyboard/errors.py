from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base for errors that abort a whole stage run."""

    code = "pipeline_error"


class WikiApiError(PipelineError):
    """
    The upstream API answered with a non-success status, returned
    something that is not JSON, or could not be reached at all.
    """

    code = "wiki_api_error"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ManifestError(PipelineError):
    """A manifest or detail file is missing, unreadable or malformed."""

    code = "manifest_error"
