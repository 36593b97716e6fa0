"""Plain-text extraction from uploaded bytes, PDFs and fetched web pages."""

import logging
import re
from pathlib import Path
from typing import Optional

import fitz
import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_STRIPPED_TAGS = ("script", "style", "noscript")


class FetchError(RuntimeError):
    """Raised when a remote source answers with a non-success status."""


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def extract_page_text(page) -> str:
    return " ".join(
        block[4] for block in page.get_text("blocks")
        if block[6] == 0 and block[4].strip()
    )


def pdf_bytes_to_text(data: bytes) -> str:
    with fitz.open(stream=data, filetype="pdf") as doc:
        text = " ".join(extract_page_text(page) for page in doc)
    return normalize_whitespace(text)


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_STRIPPED_TAGS):
        tag.decompose()
    root = soup.body or soup
    return normalize_whitespace(root.get_text(" "))


def is_pdf(name: str) -> bool:
    return Path(name.split("?", 1)[0]).suffix.lower() == ".pdf"


def bytes_to_text(data: bytes, filename: str) -> str:
    """Extract normalised text from a stored or uploaded file.

    PDFs go through PyMuPDF; every other extension is treated as UTF-8 text.
    """
    if is_pdf(filename):
        return pdf_bytes_to_text(data)
    return normalize_whitespace(data.decode("utf-8", errors="replace"))


class Fetcher:
    """Fetches a URL and returns its plain text (HTML page or PDF document)."""

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def fetch_text(self, url: str) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=self.transport
        ) as client:
            response = await client.get(url)

        if not response.is_success:
            raise FetchError(f"Fetch failed {response.status_code} for {url}")

        logger.info(f"Fetched url | url={url} | bytes={len(response.content)}")
        if is_pdf(url):
            return pdf_bytes_to_text(response.content)
        return html_to_text(response.text)
