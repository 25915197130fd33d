"""
Sheet reader: pulls the survey responses out of a published Google Sheet.

The sheet is read through its CSV export endpoint, so the share URL is
rewritten first. Parsing is deliberately forgiving: a bad row is dropped,
never fatal.
"""

import logging
import re

import requests

from nps_dashboard.config import REQUEST_TIMEOUT
from nps_dashboard.errors import (
    DashboardError,
    FetchError,
    InvalidSourceError,
    SourceUnavailableError,
)
from nps_dashboard.models import FeedbackRecord

logger = logging.getLogger(__name__)

SHEET_ID_RE = re.compile(r"spreadsheets/d/([a-zA-Z0-9-_]+)")
GID_RE = re.compile(r"[#&]gid=([0-9]+)")

# A comma is a separator only when an even number of quotes follows it
FIELD_SPLIT_RE = re.compile(r',(?=(?:(?:[^"]*"){2})*[^"]*$)')
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

# Column positions in the survey sheet
COL_CSAT_SERVICE = 0
COL_CSAT_DELIVERY = 1
COL_CSAT_PLATFORM = 2
COL_WHY_US = 3
COL_NPS = 4
COL_WHAT_BETTER = 5
COL_WOW_IDEAS = 6
COL_DATE = 16
MIN_COLUMNS = COL_DATE + 1


def build_export_url(url: str) -> str:
    """
    Turn a share URL into its CSV export URL.

    e.g. ".../spreadsheets/d/abc123/edit#gid=42"
      -> "https://docs.google.com/spreadsheets/d/abc123/export?format=csv&gid=42"

    The tab id defaults to 0 (the first tab) when the URL has none.
    """
    sheet_match = SHEET_ID_RE.search(url or "")
    if not sheet_match:
        raise InvalidSourceError(f"Invalid Google Sheet URL, sheet id not found: {url!r}")
    sheet_id = sheet_match.group(1)

    gid_match = GID_RE.search(url)
    gid = gid_match.group(1) if gid_match else "0"

    return f"https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"


def _clean_field(field: str) -> str:
    field = field.strip()
    if field.startswith('"'):
        field = field[1:]
    if field.endswith('"'):
        field = field[:-1]
    return field


def parse_csv(text: str) -> list[list[str]]:
    """
    Split CSV text into rows of fields.

    Commas inside double quotes stay in the field. Each field is trimmed and
    loses one surrounding quote on each side. Blank lines become empty rows.
    """
    rows = []
    for line in re.split(r"\r?\n", text.strip()):
        if line.strip() == "":
            rows.append([])
            continue
        rows.append([_clean_field(f) for f in FIELD_SPLIT_RE.split(line)])
    return rows


def _parse_int(value: str) -> int:
    """Leading integer of a cell ("4 - Good" -> 4); 0 when there is none."""
    match = LEADING_INT_RE.match(value or "")
    return int(match.group(1)) if match else 0


def rows_to_records(rows: list[list[str]]) -> list[FeedbackRecord]:
    """Map data rows (header already removed) to records, dropping unusable ones."""
    records = []
    for row in rows:
        if len(row) < MIN_COLUMNS:
            continue

        record = FeedbackRecord(
            csat_service=_parse_int(row[COL_CSAT_SERVICE]),
            csat_delivery=_parse_int(row[COL_CSAT_DELIVERY]),
            csat_platform=_parse_int(row[COL_CSAT_PLATFORM]),
            why_us=row[COL_WHY_US] or "",
            nps=_parse_int(row[COL_NPS]),
            what_better=row[COL_WHAT_BETTER] or "",
            wow_ideas=row[COL_WOW_IDEAS] or "",
            date=row[COL_DATE] or "",
        )
        # nps can't be NaN here (unparsable -> 0), so only the date decides
        if not record.date:
            continue
        records.append(record)

    return records


def fetch_csv(url: str) -> str:
    """GET the CSV export. Raises FetchError on transport or HTTP failure."""
    try:
        response = requests.get(url, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise FetchError(f"Request to {url} failed: {e}") from e

    if not response.ok:
        raise FetchError(f"HTTP error! status: {response.status_code}", status=response.status_code)

    return response.text


def fetch_feedback(sheet_url: str) -> list[FeedbackRecord]:
    """
    Fetch and parse every usable survey response from the sheet.

    Args:
        sheet_url: The share URL of the sheet (the one you copy from the browser).

    Returns:
        Records with a date, in sheet order. Not date-filtered.

    Raises:
        SourceUnavailableError: for any failure along the way; the cause is
            logged and chained, not shown to the user.
    """
    try:
        csv_url = build_export_url(sheet_url)
        logger.info("Fetching feedback sheet: %s", csv_url)
        text = fetch_csv(csv_url)
        rows = parse_csv(text)
        records = rows_to_records(rows[1:])  # skip header
    except DashboardError as e:
        logger.error("Failed to fetch or parse sheet: %s", e)
        raise SourceUnavailableError(
            "Could not fetch or parse the Google Sheet. Please check the URL and sharing settings."
        ) from e
    except Exception as e:
        logger.exception("Unexpected error while reading sheet")
        raise SourceUnavailableError(
            "Could not fetch or parse the Google Sheet. Please check the URL and sharing settings."
        ) from e

    logger.info("Parsed %d feedback records (%d data rows)", len(records), max(len(rows) - 1, 0))
    return records
