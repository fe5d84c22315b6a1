from __future__ import annotations

import asyncio
import html as html_lib
import re
from typing import Final, Pattern, Tuple

import structlog
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from src.extraction.types import DocumentHandle
from src.ingestion.loader import load_as_text

__all__: list[str] = ["strip_markup", "extract_text_from_html"]

logger = structlog.get_logger(__name__)

# Elements whose bodies are never rendered as text.
_INVISIBLE_TAGS: Final[Tuple[str, ...]] = ("script", "style", "template")

_INVISIBLE_BLOCK_RE: Pattern[str] = re.compile(
    r"<(script|style|template)\b[^>]*>.*?</\1\s*>", flags=re.I | re.S
)
_TAG_RE: Pattern[str] = re.compile(r"<[^>]*>", flags=re.S)


def _strip_tags_fallback(markup: str) -> str:
    """Regex tag removal, only used when the tree builder gives up."""
    without_blocks = _INVISIBLE_BLOCK_RE.sub("", markup)
    return html_lib.unescape(_TAG_RE.sub("", without_blocks))


def strip_markup(markup: str) -> str:
    """
    Return the visible text of an HTML fragment or document.

    The markup is parsed with the pure-Python ``html.parser`` builder, so no
    script runs and nothing external is fetched.  Text nodes are concatenated
    in document order without added separators, the same way a browser's
    ``textContent`` reads: ``<div>Hello <b>World</b></div>`` becomes
    ``"Hello World"``.  Malformed markup never raises.
    """
    try:
        soup = BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as e:
        logger.warning("html_parser_rejected_markup", error=str(e))
        return _strip_tags_fallback(markup)

    for element in soup.find_all(_INVISIBLE_TAGS):
        element.decompose()
    return soup.get_text()


async def extract_text_from_html(file: DocumentHandle) -> str:
    """Load *file* as UTF-8 and strip its markup off the event loop."""
    markup = await load_as_text(file)
    return await asyncio.to_thread(strip_markup, markup)
