"""Local configuration for apidoc2md."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_OUTPUT_DIR = "markdown"
DEFAULT_PROFILE = "markdown"
DEFAULT_NEWLINE = "crlf"
DEFAULT_KEYWORDS = "documentation,sdk"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_FETCH_CONCURRENCY = 4
DEFAULT_USER_AGENT = "apidoc2md/0.1 (+https://github.com/apidoc2md/apidoc2md)"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


# Output folder; it is emptied at the start of every run.
APIDOC2MD_OUTPUT_PATH = Path(os.getenv("APIDOC2MD_OUTPUT_PATH", DEFAULT_OUTPUT_DIR)).expanduser()
APIDOC2MD_PROFILE = os.getenv("APIDOC2MD_PROFILE", DEFAULT_PROFILE)
APIDOC2MD_NEWLINE = os.getenv("APIDOC2MD_NEWLINE", DEFAULT_NEWLINE)
APIDOC2MD_DRAFT = _env_flag("APIDOC2MD_DRAFT")
APIDOC2MD_KEYWORDS = tuple(
    keyword.strip()
    for keyword in os.getenv("APIDOC2MD_KEYWORDS", DEFAULT_KEYWORDS).split(",")
    if keyword.strip()
)
APIDOC2MD_LOG_LEVEL = os.getenv("APIDOC2MD_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
APIDOC2MD_FETCH_TIMEOUT_S = float(os.getenv("APIDOC2MD_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
APIDOC2MD_FETCH_MAX_RETRIES = int(os.getenv("APIDOC2MD_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
APIDOC2MD_FETCH_BACKOFF_S = float(os.getenv("APIDOC2MD_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
APIDOC2MD_FETCH_CONCURRENCY = int(os.getenv("APIDOC2MD_FETCH_CONCURRENCY", str(DEFAULT_FETCH_CONCURRENCY)))
APIDOC2MD_USER_AGENT = os.getenv("APIDOC2MD_USER_AGENT", DEFAULT_USER_AGENT)
