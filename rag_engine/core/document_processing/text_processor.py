"""
Plain text, Markdown, reStructuredText and HTML processor.

Markdown titles come from front matter or the first level-1 heading; HTML
titles from <title> or the first <h1>, with markup stripped from the body.

Dependencies: bs4, rag_engine.core.document_processing.base
System role: Text format extraction
"""

import asyncio
import re
from pathlib import Path

from bs4 import BeautifulSoup

from rag_engine.core.document_processing.base import (
    DocumentProcessor,
    ExtractedContent,
    ExtractedSection,
)
from rag_engine.core.exceptions import ExtractionError

FRONT_MATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
MARKDOWN_H1 = re.compile(r"^#[ \t]+(.+?)[ \t#]*$", re.MULTILINE)

MARKDOWN_EXTENSIONS = (".md", ".markdown")
HTML_EXTENSIONS = (".html", ".htm")


def decode_bytes(raw: bytes) -> str:
    """Decode file bytes as UTF-8 (BOM tolerated), falling back to latin-1."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def parse_front_matter(text: str) -> tuple[dict[str, str], str]:
    """
    Split a leading '---' fenced block of 'key: value' lines from the body.

    Returns:
        tuple[dict, str]: Lower-cased keys with unquoted values, and the remaining text
    """
    match = FRONT_MATTER.match(text)
    if not match:
        return {}, text

    fields = {}
    for line in match.group(1).splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip():
            fields[key.strip().lower()] = value.strip().strip("\"'")
    return fields, text[match.end():]


def parse_html(markup: str) -> tuple[str | None, str]:
    """
    Extract the title and visible text of an HTML page.

    The title is taken from <title>, else the first <h1>. Scripts, styles
    and the <head> are dropped from the body text.

    Returns:
        tuple[str | None, str]: Title (None when absent) and newline-separated text
    """
    soup = BeautifulSoup(markup, "html.parser")

    title = None
    for element in (soup.title, soup.find("h1")):
        if element is not None:
            title = element.get_text(" ", strip=True) or None
        if title:
            break

    for element in soup(["script", "style", "head"]):
        element.decompose()
    return title, soup.get_text(separator="\n", strip=True)


class TextProcessor(DocumentProcessor):
    """Processor for text-like formats."""

    name = "text"
    extensions = (".txt", ".md", ".markdown", ".rst", ".html", ".htm")

    async def extract(self, path: Path) -> ExtractedContent:
        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise ExtractionError(f"Failed to read file: {e}", str(path), path.suffix.lower()) from e

        text = decode_bytes(raw)
        suffix = path.suffix.lower()
        title = author = None

        if suffix in MARKDOWN_EXTENSIONS:
            fields, text = parse_front_matter(text)
            title, author = fields.get("title"), fields.get("author")
            if not title:
                heading = MARKDOWN_H1.search(text)
                title = heading.group(1).strip() if heading else None
        elif suffix in HTML_EXTENSIONS:
            title, text = parse_html(text)

        return ExtractedContent(sections=[ExtractedSection(text)], title=title or None, author=author or None)
