from __future__ import annotations

from typing import Any


class ListIngestError(Exception):
    """
    Base for every failure of the upload -> distribution pipeline and its reads.
    Carries the HTTP status the API layer should answer with.
    """
    status_code: int = 400

    def __init__(self, detail: Any, status_code: int | None = None):
        super().__init__(str(detail))
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class UnsupportedFileTypeError(ListIngestError):
    pass


class ParseError(ListIngestError):
    pass


class NoValidRecordsError(ListIngestError):
    pass


class NoAgentsError(ListIngestError):
    pass


class ListNotFoundError(ListIngestError):
    status_code = 404


class StoreError(ListIngestError):
    status_code = 500
