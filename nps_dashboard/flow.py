"""
Analysis flow: what happens when the user clicks Analyze or switches language.

States:
    idle -> loading -> ready
                    -> error

Analyze:         fetch sheet -> filter by date -> metrics -> 3 AI calls in parallel
Language change: re-run only the 2 language-sensitive AI calls on the records
                 we already have (no refetch, no refilter)

Failure rules:
    - Before the first successful load, a failure leaves nothing on screen
      except whatever metrics were computed before the AI step.
    - After a successful load, a failed re-analysis keeps the old dashboard
      and only adds an error banner.
    - A failed language change keeps the previous suggestions and highlights.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from nps_dashboard.config import DEFAULT_LANGUAGE, LANGUAGES, SHEET_URL
from nps_dashboard.enrichment import (
    analyze_sentiment,
    feedback_text,
    find_positive_highlights,
    generate_suggestions,
)
from nps_dashboard.errors import (
    DashboardError,
    DateRangeError,
    GenerationError,
    NoDataError,
    UnknownError,
)
from nps_dashboard.i18n import translate
from nps_dashboard.models import (
    FeedbackRecord,
    MetricsSummary,
    PositiveHighlight,
    SentimentTally,
    Suggestion,
)
from nps_dashboard.processor import calculate_metrics, filter_by_date_range, normalize_bound
from nps_dashboard.sheets import fetch_feedback

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass
class DashboardState:
    """Everything the page needs to render. Result slots are replaced, never patched."""
    language: str = DEFAULT_LANGUAGE
    phase: Phase = Phase.IDLE
    records: list[FeedbackRecord] = field(default_factory=list)
    metrics: Optional[MetricsSummary] = None
    sentiment: Optional[SentimentTally] = None
    suggestions: list[Suggestion] = field(default_factory=list)
    highlights: list[PositiveHighlight] = field(default_factory=list)
    error_key: Optional[str] = None
    has_loaded: bool = False

    @property
    def is_loading(self) -> bool:
        return self.phase is Phase.LOADING

    @property
    def error_message(self) -> Optional[str]:
        """The error banner text in the current language (None when there is no error)."""
        if self.error_key is None:
            return None
        return translate(self.language, self.error_key)

    @property
    def button_label_key(self) -> str:
        if self.is_loading:
            return "analyzing"
        return "refresh" if self.has_loaded else "analyze"

    def clear_results(self):
        self.records = []
        self.metrics = None
        self.sentiment = None
        self.suggestions = []
        self.highlights = []


class AnalysisSession:
    """
    One operator's dashboard session.

    The fetch and AI functions default to the real ones and can be swapped
    out (tests pass fakes).
    """

    def __init__(
        self,
        sheet_url: str = SHEET_URL,
        language: str = DEFAULT_LANGUAGE,
        fetch: Callable[[str], list[FeedbackRecord]] = fetch_feedback,
        sentiment: Callable[[str], SentimentTally] = analyze_sentiment,
        suggestions: Callable[[list[FeedbackRecord], str], list[Suggestion]] = generate_suggestions,
        highlights: Callable[[list[FeedbackRecord], str], list[PositiveHighlight]] = find_positive_highlights,
    ):
        _check_language(language)
        self.sheet_url = sheet_url
        self.state = DashboardState(language=language)
        self._fetch = fetch
        self._sentiment = sentiment
        self._suggestions = suggestions
        self._highlights = highlights

    # ---- Analyze ----

    def analyze(self, start=None, end=None) -> DashboardState:
        """
        Run the full pipeline for the given date range (either end may be None).
        Ignored while another load is in progress.
        """
        state = self.state
        if state.is_loading:
            logger.warning("Analysis already in progress; ignoring request")
            return state

        state.error_key = None
        if not state.has_loaded:
            state.clear_results()

        try:
            start_day = normalize_bound(start)
            end_day = normalize_bound(end)
        except ValueError as e:
            return self._fail(DateRangeError(f"Unreadable date boundary: {e}"))
        if start_day and end_day and start_day > end_day:
            return self._fail(DateRangeError(f"Start date {start_day} is after end date {end_day}"))

        state.phase = Phase.LOADING
        logger.info("Analyzing feedback from %s to %s", start_day or "the beginning", end_day or "today")

        try:
            records = self._fetch(self.sheet_url)
            filtered = filter_by_date_range(records, start_day, end_day)
            if not filtered:
                raise NoDataError(f"No records between {start_day} and {end_day} ({len(records)} in sheet)")

            metrics = calculate_metrics(filtered)
            logger.info("Metrics for %d records: NPS %d", len(filtered), metrics.nps.score)
            # A loaded dashboard is only replaced once the AI step succeeds too
            if not state.has_loaded:
                state.records = filtered
                state.metrics = metrics

            sentiment, suggestions, highlights = self._run_batch([
                (self._sentiment, (feedback_text(filtered),)),
                (self._suggestions, (filtered, state.language)),
                (self._highlights, (filtered, state.language)),
            ])
        except DashboardError as e:
            return self._fail(e)
        except Exception as e:
            logger.exception("Unexpected failure during analysis")
            return self._fail(UnknownError(str(e)))

        state.records = filtered
        state.metrics = metrics
        state.sentiment = sentiment
        state.suggestions = suggestions
        state.highlights = highlights
        state.has_loaded = True
        state.phase = Phase.READY
        return state

    # ---- Language change ----

    def change_language(self, language: str) -> DashboardState:
        """
        Switch the UI language. Once data is loaded (and nothing is loading),
        suggestions and highlights are regenerated in the new language.
        """
        _check_language(language)
        state = self.state
        if language == state.language:
            return state
        state.language = language

        if not state.has_loaded or state.is_loading or not state.records:
            return state

        state.phase = Phase.LOADING
        logger.info("Regenerating suggestions and highlights in %s", LANGUAGES[language])
        try:
            suggestions, highlights = self._run_batch([
                (self._suggestions, (state.records, language)),
                (self._highlights, (state.records, language)),
            ])
        except DashboardError as e:
            logger.error("Language refresh failed: %s", e)
            state.error_key = "errorSuggestions"
            state.phase = Phase.ERROR
            return state

        state.suggestions = suggestions
        state.highlights = highlights
        state.error_key = None
        state.phase = Phase.READY
        return state

    # ---- Helpers ----

    def _run_batch(self, calls: list[tuple]) -> list:
        """
        Run the AI calls in parallel and wait for all of them.
        Any failure fails the whole batch with a GenerationError.
        """
        with ThreadPoolExecutor(max_workers=len(calls)) as pool:
            futures = [pool.submit(fn, *args) for fn, args in calls]
            errors = [f.exception() for f in futures]

        failed = [e for e in errors if e is not None]
        if failed:
            for e in failed:
                logger.error("AI enrichment call failed: %r", e)
            raise GenerationError("AI enrichment failed") from failed[0]

        return [f.result() for f in futures]

    def _fail(self, error: DashboardError) -> DashboardState:
        logger.error("%s: %s", type(error).__name__, error)
        self.state.error_key = error.message_key
        self.state.phase = Phase.ERROR
        return self.state


def _check_language(language: str):
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported language: {language!r} (expected one of {sorted(LANGUAGES)})")
