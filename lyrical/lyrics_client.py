"""Client for the local lyrics service (see lyrical/web/server.py)."""
import logging
from typing import Optional

import httpx

from .config import LYRICS_SERVICE_URL, LYRICS_TIMEOUT

logger = logging.getLogger(__name__)


async def check_server(host: str = LYRICS_SERVICE_URL) -> bool:
    """GET /api/health — returns True if server is up."""
    try:
        async with httpx.AsyncClient(timeout=5) as client:
            r = await client.get(f"{host}/api/health")
            return r.status_code == 200
    except Exception:
        return False


async def fetch_lyrics(
    query: str,
    host: str = LYRICS_SERVICE_URL,
    client: Optional[httpx.AsyncClient] = None,
) -> tuple[str, str]:
    """
    POST /fetch-lyrics {"searchQuery": query}.
    Returns (lyrics_text, error_message). ("", "") means not found.
    """
    payload = {"searchQuery": query}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=LYRICS_TIMEOUT) as own_client:
                r = await own_client.post(f"{host}/fetch-lyrics", json=payload)
        else:
            r = await client.post(f"{host}/fetch-lyrics", json=payload)
        data = r.json()
    except httpx.TimeoutException:
        return "", f"Lyrics service timed out after {LYRICS_TIMEOUT}s"
    except httpx.HTTPError as e:
        return "", f"Lyrics service HTTP error: {e}"
    except ValueError as e:
        return "", f"Lyrics service returned invalid JSON: {e}"

    if not isinstance(data, dict):
        return "", "Lyrics service returned an unexpected payload"

    if r.status_code != 200:
        return "", f"Lyrics service HTTP {r.status_code}: {data.get('error', '')}"

    lyrics = data.get("lyrics")
    if isinstance(lyrics, str) and lyrics.strip():
        return lyrics, ""

    logger.info("No lyrics for %r: %s", query, data.get("error", "empty"))
    return "", ""
