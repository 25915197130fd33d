"""
Error taxonomy for the dashboard.

Every error carries a message_key, which the UI translates into the
selected language. The raw cause is only ever logged.
"""

from typing import Optional


class DashboardError(Exception):
    """Base class for every failure the dashboard knows how to report."""
    message_key = "errorUnknown"


class InvalidSourceError(DashboardError):
    """The sheet URL does not contain a spreadsheet id."""
    message_key = "errorSource"


class FetchError(DashboardError):
    """Transport failure or non-successful HTTP response."""
    message_key = "errorSource"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class SourceUnavailableError(DashboardError):
    """Any ingestion failure, collapsed into one user-facing error."""
    message_key = "errorSource"


class NoDataError(DashboardError):
    """No record survived the date filter."""
    message_key = "errorNoData"


class DateRangeError(DashboardError):
    """Start date is after end date."""
    message_key = "errorDateRange"


class GenerationError(DashboardError):
    """An AI call failed or returned something we could not use."""
    message_key = "errorGeneration"


class UnknownError(DashboardError):
    message_key = "errorUnknown"
