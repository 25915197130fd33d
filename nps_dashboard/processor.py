"""
Processor: the numbers behind the dashboard.

Takes the parsed survey records, keeps the ones inside the selected date
range, and computes NPS and CSAT. Pure functions only: no network, no LLM,
same input always gives the same output, whatever the order of records.
"""

import math
from datetime import date, datetime, timezone
from typing import Optional, Union

from nps_dashboard.models import (
    CsatBreakdown,
    FeedbackRecord,
    MetricsSummary,
    NpsBreakdown,
)

PROMOTER_MIN = 9
DETRACTOR_MAX = 6
SATISFIED_MIN = 4

DateBound = Union[date, datetime, str, None]


# ============================================================
# PART 1: Metrics
# ============================================================

def round_half_up(value: float) -> int:
    """Round .5 towards +infinity (-12.5 -> -12, 66.5 -> 67)."""
    return math.floor(value + 0.5)


def compute_nps(records: list[FeedbackRecord]) -> NpsBreakdown:
    """
    Net Promoter Score: % promoters (9-10) minus % detractors (0-6).
    Passives (7-8) count towards the total only.
    """
    promoters = detractors = passives = 0
    for r in records:
        if r.nps >= PROMOTER_MIN:
            promoters += 1
        elif r.nps <= DETRACTOR_MAX:
            detractors += 1
        else:
            passives += 1

    total = len(records)
    score = round_half_up((promoters - detractors) / total * 100) if total else 0

    return NpsBreakdown(
        score=score,
        promoters=promoters,
        passives=passives,
        detractors=detractors,
        total=total,
    )


def compute_csat(scores: list[int]) -> int:
    """
    Percentage of answered scores that are 4 or 5.
    0 means "not answered" and is left out of both sides of the ratio.
    """
    answered = [s for s in scores if s > 0]
    if not answered:
        return 0
    satisfied = sum(1 for s in answered if s >= SATISFIED_MIN)
    return round_half_up(satisfied / len(answered) * 100)


def calculate_metrics(records: list[FeedbackRecord]) -> MetricsSummary:
    return MetricsSummary(
        nps=compute_nps(records),
        csat=CsatBreakdown(
            service=compute_csat([r.csat_service for r in records]),
            delivery=compute_csat([r.csat_delivery for r in records]),
            platform=compute_csat([r.csat_platform for r in records]),
        ),
    )


# ============================================================
# PART 2: Date filtering
# ============================================================

def parse_feedback_date(text: str) -> Optional[date]:
    """
    Parse the sheet's "DD/MM/YYYY[ HH:MM:SS]" date. Anything after the first
    space is ignored. Returns None for anything that isn't a real calendar day.
    """
    if not text:
        return None
    parts = text.strip().split(" ")[0].split("/")
    if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
        return None
    day, month, year = (int(p) for p in parts)
    try:
        return date(year, month, day)
    except ValueError:
        return None


def normalize_bound(value: DateBound) -> Optional[date]:
    """Reduce a boundary to a calendar day (aware datetimes are read in UTC)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def filter_by_date_range(records: list[FeedbackRecord],
                         start: DateBound = None, end: DateBound = None) -> list[FeedbackRecord]:
    """
    Keep records dated within [start, end], both ends inclusive.
    A missing boundary leaves that side open. Records with an unreadable
    date are always dropped.
    """
    start_day = normalize_bound(start)
    end_day = normalize_bound(end)

    kept = []
    for r in records:
        day = parse_feedback_date(r.date)
        if day is None:
            continue
        if start_day and day < start_day:
            continue
        if end_day and day > end_day:
            continue
        kept.append(r)
    return kept
