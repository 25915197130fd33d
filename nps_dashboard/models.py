"""
Data models: the structure of our data.
Every survey row becomes a FeedbackRecord; everything else is derived from
a list of them on each analysis run and replaced wholesale on the next one.
"""

from dataclasses import dataclass, asdict

import pandas as pd


@dataclass(frozen=True)
class FeedbackRecord:
    """A single survey response."""
    csat_service: int           # 1 to 5, 0 = not answered
    csat_delivery: int
    csat_platform: int
    why_us: str                 # "Why did you choose us?"
    nps: int                    # 0 to 10
    what_better: str            # "What could we do better?"
    wow_ideas: str              # "What would wow you?"
    date: str                   # "DD/MM/YYYY" optionally followed by a time


@dataclass
class NpsBreakdown:
    score: int                  # -100 to 100
    promoters: int
    passives: int
    detractors: int
    total: int


@dataclass
class CsatBreakdown:
    """Percentage of satisfied (>= 4) respondents per category."""
    service: int
    delivery: int
    platform: int


@dataclass
class MetricsSummary:
    nps: NpsBreakdown
    csat: CsatBreakdown


@dataclass
class SentimentTally:
    positive: int
    neutral: int
    negative: int

    @property
    def total(self) -> int:
        return self.positive + self.neutral + self.negative


@dataclass
class Suggestion:
    original_comment: str
    suggestion: str


@dataclass
class PositiveHighlight:
    positive_comment: str
    nps_score: int
    reason: str


def records_to_frame(records: list[FeedbackRecord]) -> pd.DataFrame:
    """Tabular view of the records, in sheet column order."""
    columns = [
        "date", "nps", "csat_service", "csat_delivery", "csat_platform",
        "why_us", "what_better", "wow_ideas",
    ]
    if not records:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([asdict(r) for r in records])[columns]
