"""syncedlyrics bridge — runs the search in a child Python process.

The child prints exactly one JSON object: {"lyrics": "..."} or
{"error": "..."}. The query is handed over as argv, never spliced into the
script.
"""
import asyncio
import json
import logging
import subprocess
import sys
from typing import Optional

from .config import SEARCH_TIMEOUT

logger = logging.getLogger(__name__)

_SEARCH_SCRIPT = """\
import json
import sys

import syncedlyrics

search_term = sys.argv[1]
try:
    lyrics = syncedlyrics.search(search_term)
    if lyrics:
        print(json.dumps({"lyrics": lyrics}))
    else:
        print(json.dumps({"error": "No lyrics found"}))
except Exception as e:
    print(json.dumps({"error": str(e)}))
"""


def _run_search(query: str, timeout: float) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-c", _SEARCH_SCRIPT, query],
        capture_output=True, text=True, timeout=timeout,
    )


async def search_lyrics(query: str, timeout: float = SEARCH_TIMEOUT) -> tuple[Optional[dict], str]:
    """
    Run syncedlyrics.search(query) out of process.
    Returns (payload, error_message); payload is the child's JSON object.
    """
    loop = asyncio.get_running_loop()
    try:
        result = await loop.run_in_executor(None, _run_search, query, timeout)
    except subprocess.TimeoutExpired:
        return None, f"Lyrics search timed out after {timeout}s"
    except OSError as e:
        return None, f"Failed to start lyrics search: {e}"

    if result.stderr:
        logger.warning("Search stderr: %s", result.stderr.strip()[:500])

    if result.returncode != 0:
        return None, f"Search process exited with code {result.returncode}"

    try:
        payload = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        return None, f"Failed to parse search output: {e}"
    if not isinstance(payload, dict):
        return None, "Failed to parse search output: not a JSON object"

    return payload, ""
