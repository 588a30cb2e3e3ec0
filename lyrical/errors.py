"""Error reporting for the listen pipeline and the lyrics service.

Each failure becomes one JSON line in errors.log (stage, search query,
upstream message, versions). The caller gets back text for the terminal:
the full record in DEV_MODE, otherwise a short per-stage message.
"""
import json
import logging
import sys
from datetime import datetime
from typing import Optional

from . import config

logger = logging.getLogger(__name__)

# {query} is filled in when the failing stage had a search query
_STAGE_MESSAGES = {
    "record": "Couldn't record from the microphone. Check the input device or pass --file.",
    "recognize": "Couldn't identify the song. Try again closer to the speaker.",
    "fetch_lyrics": "Couldn't reach the lyrics service for \"{query}\".",
    "lyrics_search": "Lyrics search failed for \"{query}\".",
    "preflight": "Startup check failed.",
}


def error_record(stage: str, query: str = "", params: Optional[dict] = None, raw: str = "") -> dict:
    return {
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "stage": stage,
        "query": query,
        "params": params or {},
        "error": raw,
        "app_version": config.APP_VERSION,
        "python": sys.version.split()[0],
    }


def user_message(stage: str, query: str = "") -> str:
    template = _STAGE_MESSAGES.get(stage)
    if template is None:
        return f"Something went wrong ({stage})."
    if "{query}" in template and not query:
        template = template.replace(' for "{query}"', "")
    return template.format(query=query)


def format_error(
    stage: str,
    query: str = "",
    params: Optional[dict] = None,
    raw: str = "",
) -> str:
    """Record the failure and return what to show the user."""
    record = error_record(stage, query, params, raw)
    _write_record(record)
    logger.error("%s failed%s: %s", stage, f" for {query!r}" if query else "", raw)

    if config.DEV_MODE:
        return json.dumps(record, indent=2)
    return user_message(stage, query)


def _write_record(record: dict):
    try:
        config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        with open(config.ERRORS_LOG, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
    except OSError as e:
        logger.warning("Could not write %s: %s", config.ERRORS_LOG, e)
