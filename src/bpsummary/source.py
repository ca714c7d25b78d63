"""
Raw source acquisition.

A source is one of the named sources from config.DATA_SOURCES, an http(s)
URL, a local file path, or raw bytes handed in by the caller. Reading is the
only blocking step of a load; `fetch_source` runs it in a worker thread so
the session can await it. Failures raise SourceUnavailable and are never
retried here.
"""

from __future__ import annotations

import asyncio
import logging
import pathlib
import typing

import requests

from .config import BASE_URL, DATA_SOURCES, HTTP_TIMEOUT
from .errors import SourceUnavailable

logger = logging.getLogger(__name__)

Source = typing.Union[str, pathlib.Path, bytes]


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def resolve_location(source: typing.Union[str, pathlib.Path]) -> str:
    """
    Turn a source identifier into a URL or a filesystem path.
    Named sources resolve to <BASE_URL>/<name>.csv.
    """
    location = str(source)
    if location in DATA_SOURCES:
        return f"{BASE_URL}/{location}.csv"
    return location


def read_source(source: Source, *, timeout: float = HTTP_TIMEOUT) -> bytes:
    """Blocking read of the raw source bytes."""
    if isinstance(source, bytes):
        return source

    location = resolve_location(source)
    if is_url(location):
        logger.info("Fetching %s", location)
        try:
            resp = requests.get(location, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise SourceUnavailable(f"Failed GET {location}: {e}") from e
        return resp.content

    logger.info("Reading %s", location)
    try:
        return pathlib.Path(location).read_bytes()
    except OSError as e:
        raise SourceUnavailable(f"Failed to read {location}: {e}") from e


async def fetch_source(source: Source, *, timeout: float = HTTP_TIMEOUT) -> bytes:
    """Awaitable wrapper around read_source."""
    if isinstance(source, bytes):
        return source
    return await asyncio.to_thread(read_source, source, timeout=timeout)
