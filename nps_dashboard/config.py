"""
Configuration loader.
Reads settings from .env file and makes them available to the rest of the app.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Feedback survey spreadsheet (share URL, not the CSV export URL)
SHEET_URL = os.getenv(
    "FEEDBACK_SHEET_URL",
    "https://docs.google.com/spreadsheets/d/1p3R72zbazDiZ-jqfwIseEptZztagqt1z4FpAwbYmBz4/edit?gid=557438093#gid=557438093",
)

# LLM settings. Any OpenAI-compatible endpoint works
LLM_API_KEY = os.getenv("LLM_API_KEY")
LLM_BASE_URL = os.getenv("LLM_BASE_URL") or None
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")

# Supported dashboard languages: tag -> name used in prompts
LANGUAGES = {
    "es": "Spanish",
    "pt": "Portuguese",
}
DEFAULT_LANGUAGE = "es"

# Seconds before a sheet fetch or LLM call is abandoned
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
