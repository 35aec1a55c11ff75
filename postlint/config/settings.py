"""
Configuration Settings for postlint

This module centralizes all configuration settings for postlint,
including environment variables, linting thresholds, and application constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

from postlint.config.content_lists import (
    REQUIRED_FRONT_MATTER_KEYS,
    OPTIONAL_FRONT_MATTER_KEYS,
    BOOLEAN_FRONT_MATTER_KEYS,
    KNOWN_EXTRA_FRONT_MATTER_KEYS,
    TEMPLATE_SECTION_PATTERNS,
    EXCEPTION_NAME_PATTERN,
    TITLE_STOP_WORDS,
)

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))


def _env_list(name: str, default: str = "") -> list:
    """Read a comma-separated environment variable as a list of stripped values."""
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# =============================================================================
# Corpus Settings
# =============================================================================

POSTS_DIR = os.getenv("POSTLINT_POSTS_DIR", "_posts")
POST_EXTENSIONS = (".md", ".markdown")
FILE_ENCODING = os.getenv("POSTLINT_ENCODING", "utf-8")

# =============================================================================
# Lint Settings
# =============================================================================

DISABLED_RULES = _env_list("POSTLINT_DISABLED_RULES")
MIN_BODY_WORD_COUNT = int(os.getenv("POSTLINT_MIN_BODY_WORDS", "150"))   # Minimum prose words in a post body
CATEGORY_PAIR_LENGTH = 2                                                  # (cloud vendor, service name)
DEFAULT_MIN_SEVERITY = os.getenv("POSTLINT_MIN_SEVERITY", "info")

# =============================================================================
# Duplicate Detection Settings
# =============================================================================

MIN_KEYWORD_LENGTH = 3               # Minimum word length for title keyword matching
TITLE_SIMILARITY_THRESHOLD = float(os.getenv("POSTLINT_TITLE_THRESHOLD", "0.8"))
BODY_SIMILARITY_THRESHOLD = float(os.getenv("POSTLINT_BODY_THRESHOLD", "0.6"))
SHINGLE_SIZE = 5                     # Words per shingle for body comparison

# =============================================================================
# Link Checking Settings
# =============================================================================

LINK_CHECK_WORKERS = int(os.getenv("POSTLINT_LINK_WORKERS", "20"))
LINK_CHECK_TIMEOUT = int(os.getenv("POSTLINT_LINK_TIMEOUT", "10"))     # Seconds per request
LINK_CHECK_RETRIES = 2
LINK_CHECK_RETRY_DELAY = 1          # Seconds before first retry

USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
REQUEST_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
}

# =============================================================================
# Rendering Settings
# =============================================================================

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc"]
MERMAID_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/mermaid/dist/mermaid.min.js"
HTML_OUTPUT_DIR = os.getenv("POSTLINT_HTML_DIR", "_site")
