"""
LLM Client: interface for talking to an OpenAI-compatible chat model.

Key concepts:
    - System prompt: Sets the model's role and behavior (constant per task).
    - User prompt: The actual feedback (changes per call).
    - Temperature: 0 = deterministic, 1 = creative. Low for analysis.
    - Structured output: JSON object mode, validated by the caller.
"""

import json
import logging

import openai
from openai import OpenAI

from nps_dashboard.config import LLM_API_KEY, LLM_BASE_URL, LLM_MODEL, REQUEST_TIMEOUT
from nps_dashboard.errors import GenerationError

logger = logging.getLogger(__name__)


def get_client() -> OpenAI:
    """Create an OpenAI client pointed at the configured server."""
    return OpenAI(api_key=LLM_API_KEY, base_url=LLM_BASE_URL, timeout=REQUEST_TIMEOUT)


def call_llm(
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.2,
    model: str = LLM_MODEL,
    expect_json: bool = True,
) -> dict | str:
    """
    Send a prompt to the LLM and get a response.

    Returns:
        Parsed JSON dict if expect_json=True, raw string otherwise.

    Raises:
        GenerationError: the call failed, or JSON was expected and not returned.
    """
    request_kwargs = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": temperature,
    }
    if expect_json:
        request_kwargs["response_format"] = {"type": "json_object"}

    try:
        client = get_client()
        response = client.chat.completions.create(**request_kwargs)
    except openai.OpenAIError as e:
        logger.error("LLM call failed: %s", e)
        raise GenerationError(f"LLM call failed: {e}") from e

    if not response.choices or response.choices[0].message is None:
        logger.error("LLM returned no message: %r", response)
        raise GenerationError("Empty LLM response")

    raw_text = (response.choices[0].message.content or "").strip()

    if not expect_json:
        return raw_text

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as e:
        logger.error("LLM did not return valid JSON. Raw response: %s", raw_text[:500])
        raise GenerationError("Invalid JSON response") from e

    if not isinstance(parsed, dict):
        logger.error("LLM returned JSON but not an object: %s", raw_text[:500])
        raise GenerationError("Expected a JSON object")

    return parsed
