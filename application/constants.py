"""Application-level constants."""

from pathlib import Path

# Response statuses (kept compatible with the serverless classify endpoint)
STATUS_OK = 200
STATUS_CLIENT_ERROR = 400
STATUS_SERVER_ERROR = 500

# Response body keys
CLASSIFICATION_KEY = "classification"
ERROR_KEY = "error"
URL_KEY = "url"

# Client-facing message prefixes
VALIDATION_ERROR_PREFIX = "Failed to parse request"
FAILURE_PREFIX = "Function failed"

# Absolute http/https URL
URL_PATTERN = r"^https?://.+"

# Output filenames
HISTORY_FILENAME = "history.json"
TREE_FILENAME = "tree.json"
OUTCOMES_FILENAME = "outcomes.json"
CONFIG_SNAPSHOT_FILENAME = "config.resolved.json"
PROMPT_SNAPSHOT_FILENAME = "prompt.txt"

# Output directory structure
OUTPUT_ROOT = Path("outputs")
LOG_FILENAME = "run.log"
