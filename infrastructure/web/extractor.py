"""Markup -> plain text (script/style dropped, tags removed, whitespace collapsed)."""

import re
import warnings

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

_WS = re.compile(r"\s+")


def extract_text(markup: str | None) -> str:
    """
    Extract visible text from HTML markup.

    Examples:
        >>> extract_text("<p>Hello <b>world</b></p><script>x()</script>")
        'Hello world'
    """
    if not markup:
        return ""

    with warnings.catch_warnings():
        # Feeds and sitemaps come through here too; html.parser copes with them
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(markup, "html.parser")

    for tag in soup(["script", "style"]):
        tag.decompose()

    text = soup.get_text(separator=" ")
    return _WS.sub(" ", text).strip()
