from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    FETCH_FAILED = "FETCH_FAILED"
    MALFORMED_RECORD = "MALFORMED_RECORD"
    INVALID_INPUT = "INVALID_INPUT"


class NaviError(Exception):
    """Raised for every expected failure talking to the content source.

    Caught by cli.py and reported to the user. Crawl logic never catches
    it: a failed fetch aborts the whole operation that issued it.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str = "",
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        # True when running the crawl again later may succeed (rate limits, 5xx)
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, Any]:
        fields = ("message", "suggestion", "recoverable")
        return {"error": {"code": self.code.value, **{f: getattr(self, f) for f in fields}}}
