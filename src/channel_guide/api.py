"""Client for the remote channel directory API."""
from __future__ import annotations

import asyncio
import json
from http import client
from typing import List, Optional
from urllib import error, request

from .config import DEFAULT_API_URL, DEFAULT_REQUEST_TIMEOUT
from .logging_utils import get_logger
from .models import Channel, parse_channels

log = get_logger(__name__)


class ChannelLoadError(RuntimeError):
    """Raised when the channel directory cannot be fetched or decoded."""


def _fetch_payload(
    url: str, timeout: float, *, user_agent: Optional[str] = None
) -> object:
    log.debug("Fetching channel directory from %s (timeout=%s)", url, timeout)
    req = request.Request(url, headers={"Accept": "application/json"})
    if user_agent:
        req.add_header("User-Agent", user_agent)
    with request.urlopen(req, timeout=timeout) as response:  # type: ignore[call-arg]
        payload = response.read()
    log.debug("Received %d byte(s) from channel directory", len(payload))
    try:
        return json.loads(payload.decode("utf-8"))
    except UnicodeDecodeError:
        return json.loads(payload.decode("latin-1"))


def extract_channel_entries(payload: object) -> list[object]:
    """Return the ``response`` array of a directory payload.

    A missing ``response`` key, or a payload that is not an object, counts as
    an empty directory.
    """

    if not isinstance(payload, dict):
        log.warning("Channel directory payload is not an object; treating as empty")
        return []
    entries = payload.get("response")
    if entries is None:
        log.info("Channel directory payload has no 'response'; treating as empty")
        return []
    if not isinstance(entries, list):
        log.warning("Channel directory 'response' is not a list; treating as empty")
        return []
    return entries


async def fetch_channels(
    url: str = DEFAULT_API_URL,
    *,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
    user_agent: Optional[str] = None,
) -> List[Channel]:
    """Fetch and parse the channel directory at ``url`` asynchronously."""

    log.info("Requesting channel directory from %s", url)
    try:
        payload = await asyncio.to_thread(
            _fetch_payload, url, timeout, user_agent=user_agent
        )
    except (error.URLError, OSError, ValueError, client.HTTPException, RecursionError) as exc:
        # URLError covers HTTPError; ValueError covers JSONDecodeError.
        # HTTPException covers truncated bodies and malformed URLs.
        log.error("Failed to fetch channel directory from %s: %s", url, exc)
        raise ChannelLoadError(str(exc)) from exc
    return parse_channels(extract_channel_entries(payload))


__all__ = ["ChannelLoadError", "extract_channel_entries", "fetch_channels"]
