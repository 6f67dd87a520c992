"""
CLI entrypoint for the web resource classifier.

Commands:
- classify URL: fetch the page, ask the oracle for a classification, print the
  response body as JSON and append the result to the history file
- batch --input FILE: classify every URL of a CSV/Excel table into a per-run
  output folder (history, tree, outcomes, config/prompt snapshots, log)
- tree: aggregate the history file into the hierarchical index
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import opik
from dotenv import load_dotenv

from application import (
    aggregate_history,
    classify_url,
    outcomes_to_history,
    run_batch,
    save_tree,
    summarize_tree,
    validate_url,
)
from application.constants import (
    CONFIG_SNAPSHOT_FILENAME,
    HISTORY_FILENAME,
    LOG_FILENAME,
    OUTCOMES_FILENAME,
    OUTPUT_ROOT,
    PROMPT_SNAPSHOT_FILENAME,
    TREE_FILENAME,
)
from domain.errors import TreeConflictError, ValidationError
from infrastructure.config import RunConfig, load_run_config
from infrastructure.constants import CLASSIFIER_CONFIG_FILE
from infrastructure.io import append_history, ensure_exists, extract_url_rows, load_history, read_table, write_json
from infrastructure.observability import configure_logging, make_run_tag, set_log_context
from infrastructure.prompting import PromptManager
from infrastructure.providers import make_adapter
from infrastructure.web import HttpFetcher

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Classify web resources with an LLM and build a hierarchical index")
    p.add_argument(
        "--config",
        type=str,
        default=str(CLASSIFIER_CONFIG_FILE),
        help="Path to classifier.yaml (default: configs/classifier.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file (default: .env; optional)",
    )
    p.add_argument(
        "--mock",
        action="store_true",
        help="Use Mock adapter instead of calling a real provider.",
    )
    p.add_argument("--console-level", type=str, default="INFO", choices=LOG_LEVELS, help="Console log level")
    p.add_argument("--file-level", type=str, default="DEBUG", choices=LOG_LEVELS, help="File log level")

    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("classify", help="Classify a single URL")
    c.add_argument("url", type=str, help="Absolute http(s) URL")
    c.add_argument("--history", type=str, default=None, help="History file to append to (default: from config)")
    c.add_argument("--no-history", action="store_true", help="Do not record the result in the history file")

    b = sub.add_parser("batch", help="Classify every URL in a CSV/Excel table")
    b.add_argument("--input", type=str, required=True, help="CSV/Excel file with a URL column")
    b.add_argument("--history", type=str, default=None, help="Also append results to this history file")

    t = sub.add_parser("tree", help="Aggregate a history file into the hierarchical index")
    t.add_argument("--history", type=str, default=None, help="History file (default: from config)")
    t.add_argument("--out", type=str, default=None, help="Write the tree JSON here instead of stdout")

    return p.parse_args()


def _load_cfg(args: argparse.Namespace) -> RunConfig:
    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        logger.debug("No env file at %s; using process environment", env_file)

    config_path = Path(args.config)
    ensure_exists(config_path, "classifier.yaml")
    return load_run_config(config_path)


def _cmd_classify(args: argparse.Namespace, cfg: RunConfig) -> int:
    try:
        validate_url(args.url)
    except ValidationError as e:
        # Invalid input never reaches the network
        print(json.dumps({"error": f"Failed to parse request: {e}"}, ensure_ascii=False))
        return 2

    adapter = make_adapter(cfg, use_mock=bool(args.mock))
    prompt = PromptManager(prompts_root=cfg.prompts_root).get_prompt(cfg.provider, cfg)

    with HttpFetcher(cfg.fetch) as fetcher:
        outcome = classify_url(args.url, cfg=cfg, adapter=adapter, prompt=prompt, fetcher=fetcher)

    print(json.dumps(outcome.to_response(), ensure_ascii=False, indent=2))

    if not args.no_history:
        history_path = Path(args.history) if args.history else cfg.history_file
        append_history(history_path, [outcome.to_history_entry()])

    return 0 if outcome.ok else 1


def _cmd_batch(args: argparse.Namespace, cfg: RunConfig) -> int:
    # ---- Per-run output folder ----
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_id = f"{ts}_{cfg.provider.value if not args.mock else 'mock_provider'}_{cfg.model if not args.mock else 'mock_model'}"
    run_dir = OUTPUT_ROOT / run_id
    run_dir.mkdir(parents=True, exist_ok=True)

    log_path = run_dir / LOG_FILENAME
    configure_logging(
        log_file=log_path,
        console_level=getattr(logging, args.console_level),
        file_level=getattr(logging, args.file_level),
    )
    set_log_context(run_id_full=run_id, provider=cfg.provider.value, model=cfg.model)
    logger.info("Starting run: run_id=%s (run_tag=%s)", run_id, make_run_tag(run_id))
    logger.info("Run output directory: %s", run_dir)

    input_path = Path(args.input)
    logger.info("Loading URLs from %s...", input_path)
    df = read_table(input_path)
    rows = extract_url_rows(df, cfg.url_col, cfg.id_col)
    logger.info("URL table loaded: %d rows, %d usable URLs", df.shape[0], len(rows))

    prompt = PromptManager(prompts_root=cfg.prompts_root).get_prompt(cfg.provider, cfg)

    # Save snapshot config + prompt
    write_json(run_dir / CONFIG_SNAPSHOT_FILENAME, cfg.model_dump(mode="json"))
    (run_dir / PROMPT_SNAPSHOT_FILENAME).write_text(prompt.prompt, encoding="utf-8")

    logger.info("Initializing provider (provider=%s, model=%s)...", cfg.provider.value, cfg.model)
    adapter = make_adapter(cfg, use_mock=bool(args.mock))

    with HttpFetcher(cfg.fetch) as fetcher:
        outcomes, stats = run_batch(rows, cfg=cfg, adapter=adapter, prompt=prompt, fetcher=fetcher)

    write_json(run_dir / OUTCOMES_FILENAME, {"stats": stats, "outcomes": [o.model_dump(mode="json") for o in outcomes]})

    entries = outcomes_to_history(outcomes)
    write_json(run_dir / HISTORY_FILENAME, [e.model_dump(mode="json") for e in entries])
    if args.history:
        entries = append_history(Path(args.history), entries)

    try:
        tree = aggregate_history(entries)
    except TreeConflictError as e:
        logger.error("Could not build tree: %s", e)
        return 1
    save_tree(tree, run_dir / TREE_FILENAME)

    for line in summarize_tree(tree):
        logger.info("  %s", line)
    logger.info("Detailed log: %s", log_path)
    return 0


def _cmd_tree(args: argparse.Namespace, cfg: RunConfig) -> int:
    history_path = Path(args.history) if args.history else cfg.history_file
    entries = load_history(history_path)

    try:
        tree = aggregate_history(entries)
    except TreeConflictError as e:
        logger.error("Could not build tree: %s", e)
        return 1

    if args.out:
        save_tree(tree, Path(args.out))
    else:
        print(json.dumps(tree.to_dict(), ensure_ascii=False, indent=2))
    for line in summarize_tree(tree):
        logger.info("  %s", line)
    return 0


def main() -> int:
    args = _parse_args()

    # Batch runs reconfigure logging with a per-run file handler
    configure_logging(console_level=getattr(logging, args.console_level))

    cfg = _load_cfg(args)
    if args.command != "tree":
        opik.configure()

    if args.command == "classify":
        return _cmd_classify(args, cfg)
    if args.command == "batch":
        return _cmd_batch(args, cfg)
    return _cmd_tree(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
