import os

# Keep tests offline: no Opik traces are created or sent
os.environ.setdefault("OPIK_TRACK_DISABLE", "true")

import pytest  # noqa: E402

from infrastructure.config.models import GeminiConfig, Provider, RunConfig  # noqa: E402
from infrastructure.prompting.manager import LocalPrompt  # noqa: E402
from infrastructure.web.fetcher import FetchResult  # noqa: E402


class StaticFetcher:
    """Fetcher double returning canned markup and recording requested URLs."""

    def __init__(self, body: str = "", status: int = 200, error: Exception | None = None) -> None:
        self.body = body
        self.status = status
        self.error = error
        self.calls: list[str] = []

    def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return FetchResult(status=self.status, body=self.body)


@pytest.fixture
def cfg() -> RunConfig:
    return RunConfig(
        provider=Provider.GEMINI,
        model="dummy-model",
        gemini=GeminiConfig(),
        max_content_chars=200,
    )


@pytest.fixture
def prompt() -> LocalPrompt:
    return LocalPrompt(
        name="gemini.classify-url",
        prompt="URL: {{target_url}}\n---\n{{page_text}}\n---",
        metadata={},
    )


@pytest.fixture
def page_fetcher() -> StaticFetcher:
    return StaticFetcher(
        body="<html><head><style>p{}</style></head><body><h1>Release notes</h1>"
        "<script>track()</script><p>Version 2.0 ships today.</p></body></html>"
    )


@pytest.fixture
def fetcher_factory() -> type[StaticFetcher]:
    return StaticFetcher
