"""Web boundary: origin fetch and markup-to-text extraction."""

from infrastructure.web.extractor import extract_text
from infrastructure.web.fetcher import Fetcher, FetchResult, HttpFetcher

__all__ = [
    "Fetcher",
    "FetchResult",
    "HttpFetcher",
    "extract_text",
]
