from pathlib import Path

# Repo-root conventional directories/files (overrideable via classifier.yaml)
CONFIG_DIR = Path("configs")
PROVIDERS_DIR = CONFIG_DIR / "providers"
CLASSIFIER_CONFIG_FILE = CONFIG_DIR / "classifier.yaml"

PROMPTS_DIR = Path("prompts")
PROMPT_FILENAME = "classify-url.txt"

OUTPUT_ROOT = Path("outputs")
DEFAULT_HISTORY_FILE = OUTPUT_ROOT / "history.json"

# Oracle input budget (characters of extracted page text)
DEFAULT_MAX_CONTENT_CHARS = 15_000

# Browser-like UA; many sites reject default HTTP client agents
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
