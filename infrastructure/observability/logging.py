"""
Logging setup for classifier runs.

Every line carries two short correlation tags pulled from contextvars:
`r=` the run (a batch or a single CLI invocation) and `q=` the request (one URL).
The console gets human-readable INFO lines; batch runs also get a rotating DEBUG file.
"""

import contextvars
import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

TAG_LENGTH = 8
UNSET = "-"

_run_id = contextvars.ContextVar("run_id", default=UNSET)
_run_tag = contextvars.ContextVar("run_tag", default=UNSET)
_request_id = contextvars.ContextVar("request_id", default=UNSET)
_provider = contextvars.ContextVar("provider", default=UNSET)
_model = contextvars.ContextVar("model", default=UNSET)

# Chatty client libraries; their request-level lines duplicate ours
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "openai", "anthropic")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] r=%(run)s q=%(req)s | %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s | r=%(run)s q=%(req)s | %(message)s"


def make_run_tag(run_id_full: str, length: int = TAG_LENGTH) -> str:
    """Short, stable tag for a run id (BLAKE2s prefix)."""
    return hashlib.blake2s(run_id_full.encode("utf-8"), digest_size=8).hexdigest()[:length]


class ContextInjectFilter(logging.Filter):
    """Copy the run and request tags onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = _run_tag.get()
        record.req = _request_id.get()
        return True


def set_log_context(
    *,
    run_id_full: str | None = None,
    provider: str | None = None,
    model: str | None = None,
) -> None:
    """Set run-level context fields; None leaves a field unchanged."""
    if run_id_full is not None:
        _run_id.set(str(run_id_full))
        _run_tag.set(make_run_tag(str(run_id_full)))
    if provider is not None:
        _provider.set(str(provider))
    if model is not None:
        _model.set(str(model))


@contextmanager
def request_log_context(request_id: str) -> Iterator[None]:
    """Tag log lines emitted inside the block with `request_id`, then restore the previous tag."""
    # Request ids are uuid hex; a prefix is enough to correlate lines
    token = _request_id.set(str(request_id)[:TAG_LENGTH])
    try:
        yield
    finally:
        _request_id.reset(token)


def get_log_context() -> dict[str, str]:
    """Current context as trace metadata for oracle calls."""
    return {
        "run_tag": _run_tag.get(),
        "run_id_full": _run_id.get(),
        "request_id": _request_id.get(),
        "provider": _provider.get(),
        "model": _model.get(),
    }


def _handler(handler: logging.Handler, level: int, fmt: str, datefmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    handler.addFilter(ContextInjectFilter())
    return handler


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,
    backup_count: int = 5,
) -> None:
    """
    Replace the root handlers with a console handler and, when `log_file` is given,
    a rotating file handler.

    Safe to call more than once (the batch command reconfigures with its run log).
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    root.addHandler(_handler(logging.StreamHandler(), console_level, CONSOLE_FORMAT, "%H:%M:%S"))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        root.addHandler(_handler(file_handler, file_level, FILE_FORMAT, "%Y-%m-%d %H:%M:%S"))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("opik").setLevel(logging.INFO)

    logging.getLogger(__name__).info(
        "Logging configured (console=%s, file=%s)",
        logging.getLevelName(console_level),
        log_file if log_file is not None else "-",
    )
