"""
AI enrichment: the three things we ask the LLM about the filtered feedback.

    1. Sentiment tally across all free-text answers.
    2. Improvement suggestions, each tied to the comment that inspired it.
    3. Positive highlights: the promoter comments that best show our strengths.

The metrics are computed with code (see processor.py). The LLM only reads
text. Every response is validated here; anything off-contract raises
GenerationError so the caller can treat it like a network failure.
"""

import json
import logging
import math

from nps_dashboard.config import LANGUAGES
from nps_dashboard.errors import GenerationError
from nps_dashboard.llm_client import call_llm
from nps_dashboard.models import (
    FeedbackRecord,
    PositiveHighlight,
    SentimentTally,
    Suggestion,
)
from nps_dashboard.processor import PROMOTER_MIN

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5
MAX_HIGHLIGHTS = 3


# ============================================================
# PROMPTS
# ============================================================

SENTIMENT_SYSTEM_PROMPT = """You classify customer comments by sentiment.

RULES:
1. Each line of input is one customer's comments.
2. Categorize every line as "positive", "neutral" or "negative".
3. Count how many lines fall into each category.

Respond in this exact JSON format, with no other text:
{"positive": number, "neutral": number, "negative": number}"""

SUGGESTIONS_SYSTEM_PROMPT = """You are an expert business consultant reviewing customer feedback.

RULES:
1. Provide 3-5 concrete, actionable improvement suggestions.
2. Each suggestion must be inspired by one of the customer comments given.
3. Quote that comment verbatim in "originalComment". Do NOT invent comments.
4. Write the suggestions in {language}.

Respond in this exact JSON format:
{{
    "suggestions": [
        {{"originalComment": "verbatim customer comment", "suggestion": "your actionable suggestion"}}
    ]
}}"""

HIGHLIGHTS_SYSTEM_PROMPT = """You analyze positive customer feedback (NPS 9-10).

RULES:
1. Pick the 2-3 most impactful comments that show the company's strengths.
2. Quote each comment verbatim in "positiveComment" and copy its NPS score.
3. Add a brief reason explaining why it shows a key strength.
4. Write the reasons in {language}.

Respond in this exact JSON format:
{{
    "highlights": [
        {{"positiveComment": "verbatim comment", "npsScore": number, "reason": "why this is a key strength"}}
    ]
}}"""


# ============================================================
# INPUT BUILDERS
# ============================================================

def feedback_text(records: list[FeedbackRecord]) -> str:
    """All free-text answers, one line per respondent."""
    return "\n".join(f"{r.why_us} {r.what_better} {r.wow_ideas}" for r in records)


def improvement_lines(records: list[FeedbackRecord]) -> str:
    lines = []
    for r in records:
        comment = r.what_better.strip() or r.wow_ideas.strip()
        if comment:
            lines.append(f'- Comment: "{comment}". NPS Score: {r.nps}')
    return "\n".join(lines)


def promoter_lines(records: list[FeedbackRecord]) -> str:
    return "\n".join(
        json.dumps({"comment": r.why_us, "nps": r.nps}, ensure_ascii=False)
        for r in records
        if r.nps >= PROMOTER_MIN and r.why_us.strip()
    )


def _language_name(language: str) -> str:
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported language: {language!r}")
    return LANGUAGES[language]


# ============================================================
# RESPONSE VALIDATION
# ============================================================

def _require_count(payload: dict, key: str) -> int:
    value = payload.get(key)
    # bool is an int subclass; "true" is not a count
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise GenerationError(f"Missing or non-numeric '{key}' in sentiment response")
    if value < 0 or value != int(value):
        raise GenerationError(f"Invalid count for '{key}': {value}")
    return int(value)


def _require_list(payload: dict, key: str) -> list:
    items = payload.get(key)
    if not isinstance(items, list):
        raise GenerationError(f"Expected a list under '{key}'")
    for item in items:
        if not isinstance(item, dict):
            raise GenerationError(f"Expected objects in '{key}', got {type(item).__name__}")
    return items


def _require_str(item: dict, key: str) -> str:
    value = item.get(key)
    if not isinstance(value, str):
        raise GenerationError(f"Missing or non-string '{key}'")
    return value


# ============================================================
# THE THREE CAPABILITIES
# ============================================================

def analyze_sentiment(text: str) -> SentimentTally:
    """Count positive / neutral / negative comments in the text."""
    result = call_llm(
        system_prompt=SENTIMENT_SYSTEM_PROMPT,
        user_prompt=f"Comments:\n\n{text}",
        temperature=0.1,
    )
    tally = SentimentTally(
        positive=_require_count(result, "positive"),
        neutral=_require_count(result, "neutral"),
        negative=_require_count(result, "negative"),
    )
    logger.info("Sentiment: %d positive, %d neutral, %d negative",
                tally.positive, tally.neutral, tally.negative)
    return tally


def generate_suggestions(records: list[FeedbackRecord], language: str) -> list[Suggestion]:
    """
    Ask for up to 5 improvement suggestions in the given language.
    Returns [] without calling the LLM when nobody wrote an improvement idea.
    """
    language_name = _language_name(language)
    feedback = improvement_lines(records)
    if not feedback:
        logger.info("No improvement comments in range; skipping suggestions")
        return []

    result = call_llm(
        system_prompt=SUGGESTIONS_SYSTEM_PROMPT.format(language=language_name),
        user_prompt=f"Respond in {language_name}.\n\nFeedback:\n{feedback}",
    )
    suggestions = [
        Suggestion(
            original_comment=_require_str(item, "originalComment"),
            suggestion=_require_str(item, "suggestion"),
        )
        for item in _require_list(result, "suggestions")
    ]
    return suggestions[:MAX_SUGGESTIONS]


def find_positive_highlights(records: list[FeedbackRecord], language: str) -> list[PositiveHighlight]:
    """
    Ask for the 2-3 promoter comments that best show our strengths.
    Returns [] without calling the LLM when no promoter explained their score.
    """
    language_name = _language_name(language)
    feedback = promoter_lines(records)
    if not feedback:
        logger.info("No promoter comments in range; skipping highlights")
        return []

    result = call_llm(
        system_prompt=HIGHLIGHTS_SYSTEM_PROMPT.format(language=language_name),
        user_prompt=f"Respond in {language_name}.\n\nPositive Feedback Data:\n{feedback}",
    )
    highlights = []
    for item in _require_list(result, "highlights"):
        score = item.get("npsScore")
        if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
            raise GenerationError("Missing or non-numeric 'npsScore'")
        highlights.append(PositiveHighlight(
            positive_comment=_require_str(item, "positiveComment"),
            nps_score=int(score),
            reason=_require_str(item, "reason"),
        ))
    return highlights[:MAX_HIGHLIGHTS]
