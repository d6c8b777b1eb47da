"""
Gemini calls for the two AI steps: cleaning the uploaded data and proposing
chart configurations for the dashboard.

Both calls are async and either return validated models or raise
``ServiceError``. Nothing is committed to session state here; callers only
update history after a fully successful response.
"""

import json
import logging
import re
from typing import List, Optional, Sequence

import google.generativeai as genai
import streamlit as st
from pydantic import TypeAdapter

from ..config import settings
from ..models import ChartConfig, CleaningResults, DataRecord

logger = logging.getLogger(__name__)

AUTO_CLEAN_PROMPT = """
Automatically clean and preprocess the data. Perform the following tasks:
1.  Identify column data types (numeric, string, date).
2.  Handle missing values: Remove any row that contains one or more missing, empty, or null values in any of its columns. Do not attempt to fill missing data.
3.  Remove any fully duplicate rows.
4.  Trim leading/trailing whitespace from all string values.
5.  Attempt to standardize date formats to YYYY-MM-DD.
6.  Correct obvious typos in categorical columns if possible (e.g., 'Nwe York' to 'New York').
"""

CLEAN_ERROR = "Failed to clean data. The model returned an unexpected format."
DASHBOARD_ERROR = "Failed to generate dashboard. The model returned an unexpected format."

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)
_chart_list = TypeAdapter(List[ChartConfig])


class ServiceError(Exception):
    pass


class MissingApiKeyError(ServiceError):
    pass


class MissingInstructionsError(ValueError):
    pass


# ---------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------
def build_cleaning_prompt(raw_csv: str, instructions: str) -> str:
    return f"""
You are an expert data cleaning assistant. Your task is to process the following raw CSV data based on the user's instructions and produce a detailed report of your actions.

User's instructions: "{instructions}"

Raw CSV data:
\"\"\"
{raw_csv}
\"\"\"

Your task:
1.  Perform the cleaning operations as requested by the user. This may include removing rows, filling missing values, correcting data types, trimming whitespace, standardizing formats, etc.
2.  Convert the final, cleaned data into a JSON array of objects, where each object is a row and keys are column headers. Ensure numerical values are numbers, not strings.
3.  Create a "changeLog" object that details the actions you took.
    - The "summary" should be a human-readable, high-level overview of the cleaning operations performed.
    - The "removedRows" array should contain one object for EACH row that was removed, with:
        - "originalRow": the complete row exactly as it appeared in the raw CSV data, as a JSON object.
        - "reason": a brief explanation for why the row was removed.
4.  Your final output MUST be a single JSON object with exactly two keys, "cleanedData" and "changeLog". Do not include any text outside of this JSON object.
"""


def build_dashboard_prompt(records: Sequence[DataRecord], instructions: str, sample_rows: int) -> str:
    sample = json.dumps(list(records[:sample_rows]), indent=2, default=str)
    return f"""
You are an expert data analyst and visualization specialist. Analyze the provided JSON data and generate configurations for insightful charts based on the user's request.
- Suggest one or more appropriate charts to build a dashboard.
- 'dataKey' is a column for the X-axis or labels (categories, dates). It must exist in the data.
- 'valueKeys' is an array of one or more NUMERIC columns to plot. These keys must exist in the data.
- 'chartType' is one of 'bar', 'line', 'pie', 'area', 'scatter'.
- Give each chart a concise 'title' and a short, insightful 'description'.
- Output a JSON array of objects with keys title, chartType, dataKey, valueKeys, description and nothing else.

User's request: "{instructions}"

Cleaned JSON data (sample of first {sample_rows} rows):
\"\"\"
{sample}
\"\"\"
"""


# ---------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------
def _strip_fences(text: str) -> str:
    text = (text or "").strip()
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def parse_cleaning_response(text: str) -> CleaningResults:
    return CleaningResults.model_validate_json(_strip_fences(text))


def parse_chart_response(text: str) -> List[ChartConfig]:
    return _chart_list.validate_json(_strip_fences(text))


# ---------------------------------------------------------------------
# Gemini client
# ---------------------------------------------------------------------
def _api_key() -> Optional[str]:
    if settings.GEMINI_API_KEY:
        return settings.GEMINI_API_KEY
    try:
        return st.secrets.get("GEMINI_API_KEY") or st.secrets.get("GOOGLE_API_KEY")
    except Exception:
        # no secrets.toml outside of a configured deployment
        logger.debug("No Streamlit secrets available", exc_info=True)
        return None


def _get_model(model_name: str):
    api_key = _api_key()
    if not api_key:
        raise MissingApiKeyError(
            "No Gemini API key configured. Set GEMINI_API_KEY in the environment or .env file."
        )
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(
        model_name,
        generation_config={"response_mime_type": "application/json"},
    )


def _require_instructions(instructions: str, message: str) -> str:
    if not instructions or not instructions.strip():
        raise MissingInstructionsError(message)
    return instructions.strip()


async def clean_dataset(raw_csv: str, instructions: str) -> CleaningResults:
    instructions = _require_instructions(instructions, "Please provide cleaning instructions.")
    model = _get_model(settings.CLEAN_MODEL)
    try:
        response = await model.generate_content_async(build_cleaning_prompt(raw_csv, instructions))
        return parse_cleaning_response(response.text)
    except ValueError as e:
        logger.exception("Error cleaning data with Gemini")
        raise ServiceError(CLEAN_ERROR) from e
    except Exception as e:
        logger.exception("Gemini cleaning request failed")
        raise ServiceError(f"{CLEAN_ERROR} ({e})") from e


async def generate_chart_configs(records: Sequence[DataRecord], instructions: str) -> List[ChartConfig]:
    instructions = _require_instructions(instructions, "Please provide instructions for the dashboard.")
    model = _get_model(settings.DASHBOARD_MODEL)
    prompt = build_dashboard_prompt(records, instructions, settings.DASHBOARD_SAMPLE_ROWS)
    try:
        response = await model.generate_content_async(prompt)
        return parse_chart_response(response.text)
    except ValueError as e:
        logger.exception("Error generating dashboard configs with Gemini")
        raise ServiceError(DASHBOARD_ERROR) from e
    except Exception as e:
        logger.exception("Gemini dashboard request failed")
        raise ServiceError(f"{DASHBOARD_ERROR} ({e})") from e
