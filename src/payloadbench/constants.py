"""Constants for payloadbench."""

import os
from pathlib import Path

# Report store
# Precedence: CLI --reports-dir > PAYLOADBENCH_REPORTS_DIR env var > "reports"
DEFAULT_REPORTS_DIR = Path(os.environ.get("PAYLOADBENCH_REPORTS_DIR", "reports"))
DEFAULT_DATASET_PATH = Path(os.environ.get("PAYLOADBENCH_DATASET", "data/mock-analysis.json"))

TRIAL_REPORT_PREFIX = "benchmark-"
TRIAL_REPORT_SUFFIX = ".md"
SNAPSHOT_SUFFIX = ".json"
RAW_RESPONSE_SUFFIX = "-response.json"
SUMMARY_REPORT_STEM = "OVERALL_COMPARISON_SUMMARY"

# Model defaults
DEFAULT_MODEL = "gemini-2.0-flash"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
MODEL_ENV_VAR = "GEMINI_MODEL"
COOLDOWN_ENV_VAR = "PAYLOADBENCH_REQUEST_COOLDOWN_MS"
DEFAULT_TEMPERATURE = 0.2
DEFAULT_TOP_P = 0.8

# Rate limiting and series
DEFAULT_REQUEST_COOLDOWN_MS = 4_500
DEFAULT_REPEAT = 1
DEFAULT_DELAY_MS = 20_000

# Reporting
DEFAULT_EXCERPT_MAX_LENGTH = 240
EXCERPT_ELLIPSIS = "…"
NOT_AVAILABLE = "n/a"
METRICS_TABLE_COLUMNS = (
    "Format",
    "Input tokens sent",
    "Prompt tokens in response",
    "Total tokens in response",
    "Data prep time",
    "Gemini response time",
)

# Prompt sent with every payload
INSTRUCTIONS = """You are an analytics assistant. Evaluate the provided marketing performance dataset.
Summarize key trends, identify risks, and recommend the next two strategic experiments.
Keep the answer under 300 tokens and structure it with clear bullet points."""
