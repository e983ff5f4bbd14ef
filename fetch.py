"""
fetch.py
Downloads a PATH schedule page and parses it into a document tree.

Every failure (network error, timeout, non-200, non-HTML) surfaces as
FetchFailed; nothing is retried here. The timeout bounds the whole download,
body included, not just the connect and each socket read.
"""

import logging
import time

import requests
from bs4 import BeautifulSoup

from config import FETCH_TIMEOUT, SCHEDULE_URL_STUB
from errors import FetchFailed

logger = logging.getLogger(__name__)

HEADERS = {
    # friendlier UA; some sites block generic bots
    "User-Agent": "Mozilla/5.0 (compatible; path-schedule/1.0)"
}


def schedule_url(page: str, stub: str = SCHEDULE_URL_STUB) -> str:
    return stub % page

def is_html_response(resp: requests.Response) -> bool:
    ctype = (resp.headers.get("Content-Type") or "").lower()
    return "text/html" in ctype or "application/xhtml+xml" in ctype

def _read_body(resp: requests.Response, url: str, timeout: float, deadline: float) -> bytes:
    chunks = []
    try:
        # chunk_size=None yields data as it arrives instead of waiting for a full block
        for chunk in resp.iter_content(chunk_size=None):
            if time.monotonic() > deadline:
                logger.warning("[fetch] body still arriving after %ss: %s", timeout, url)
                raise FetchFailed(f"timed out after {timeout}s fetching {url}")
            chunks.append(chunk)
    except requests.RequestException as e:
        raise FetchFailed(f"request error: {url} -> {e}") from e
    return b"".join(chunks)

def fetch_document(url: str, timeout: float = FETCH_TIMEOUT) -> BeautifulSoup:
    logger.info("[fetch] GET %s (timeout %ss)", url, timeout)
    deadline = time.monotonic() + timeout
    try:
        resp = requests.get(url, headers=HEADERS, timeout=timeout, stream=True)
    except requests.Timeout as e:
        logger.warning("[fetch] timed out: %s", url)
        raise FetchFailed(f"timed out after {timeout}s fetching {url}") from e
    except requests.RequestException as e:
        logger.warning("[fetch] request error: %s -> %s", url, e)
        raise FetchFailed(f"request error: {url} -> {e}") from e

    try:
        if resp.status_code != 200:
            raise FetchFailed(f"status {resp.status_code} fetching {url}")
        if not is_html_response(resp):
            raise FetchFailed(f"non-HTML response fetching {url}")
        body = _read_body(resp, url, timeout, deadline)
        return BeautifulSoup(body, "lxml")
    finally:
        # Drop whatever is left of the body; the connection can be rebuilt.
        resp.close()
