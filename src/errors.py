"""Error types for advisory ingestion."""
from enum import Enum
from typing import Optional


class ParseErrorKind(Enum):
    """Reason a single detail window could not be parsed."""
    UNKNOWN_MONTH = "unknown-month"
    MALFORMED_DATE_PART = "malformed-date-part"
    MALFORMED_TIME_PART = "malformed-time-part"


class AdvisoryError(Exception):
    """Base class for all advisory ingestion errors."""


class ParseError(AdvisoryError):
    """
    A day/time window fragment could not be parsed.
    Scoped to one window; the detail parser skips the window and continues.
    """

    def __init__(self, kind: ParseErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class RecordError(AdvisoryError):
    """One advisory failed enrichment or storage. The batch continues."""

    def __init__(self, advisory_id: Optional[int], message: str):
        super().__init__(message)
        self.advisory_id = advisory_id


class FetchError(AdvisoryError):
    """The upstream advisory fetch failed. Fatal to the invocation."""


class ConfigError(AdvisoryError):
    """A required configuration value is missing or invalid."""
