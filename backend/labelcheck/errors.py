"""
Error taxonomy for the verification engine.
A missing match is a business outcome, not an error; nothing here reaches the post_process caller.
"""
from typing import Optional


class LabelCheckError(Exception):
    """Base class for engine errors."""


class DataSourceError(LabelCheckError):
    """Upstream reference fetch failed. Raised by sources, absorbed by ReferenceCache."""

    def __init__(self, table: str, message: str):
        super().__init__(f"{table}: {message}")
        self.table = table
        self.message = message


class CheckerFailure(LabelCheckError):
    """A domain check failed at the fan-out boundary and contributed nothing."""

    def __init__(self, check: str, cause: Optional[BaseException] = None):
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error"
        super().__init__(f"{check} check failed ({detail})")
        self.check = check
        self.cause = cause
