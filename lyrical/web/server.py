"""Starlette app — lyrics fetch service backed by the on-disk cache."""
import importlib.util
import json
import logging
from pathlib import Path
from typing import Optional

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..cache import LyricsCache
from ..config import APP_VERSION
from ..errors import format_error
from ..searcher import search_lyrics

logger = logging.getLogger(__name__)

_cache: Optional[LyricsCache] = None


# ── Health ───────────────────────────────────────────────────────────────────

async def health(request):
    checks = {}

    has_lib = importlib.util.find_spec("syncedlyrics") is not None
    checks["syncedlyrics"] = {"ok": has_lib}
    if not has_lib:
        checks["syncedlyrics"]["error"] = "not installed"

    cache_dir = _cache.cache_dir
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
        checks["cache"] = {"ok": True, "dir": str(cache_dir), "entries": len(_cache.entries())}
    except OSError as e:
        checks["cache"] = {"ok": False, "error": str(e)}

    all_ok = all(c["ok"] for c in checks.values())
    return JSONResponse({
        "status": "ok" if all_ok else "degraded",
        "version": APP_VERSION,
        "checks": checks,
    })


# ── Lyrics ───────────────────────────────────────────────────────────────────

async def fetch_lyrics(request):
    try:
        body = await request.json()
    except (json.JSONDecodeError, ValueError):
        body = {}
    query = body.get("searchQuery") if isinstance(body, dict) else None

    if not isinstance(query, str) or not query.strip():
        return JSONResponse({"error": "Search query is required"}, status_code=400)

    cached = _cache.get(query)
    if cached:
        logger.info("Cache hit: %s", query)
        return JSONResponse({"lyrics": cached, "cached": True})

    payload, err = await search_lyrics(query)
    if err:
        format_error("lyrics_search", query, raw=err)
        return JSONResponse({"error": err}, status_code=500)

    lyrics = payload.get("lyrics")
    if isinstance(lyrics, str) and lyrics.strip():
        _cache.put(query, lyrics)
        return JSONResponse({"lyrics": lyrics, "cached": False})

    return JSONResponse({"error": payload.get("error") or "No lyrics found"})


# ── App factory ──────────────────────────────────────────────────────────────

def create_app(cache_dir: Optional[Path] = None) -> Starlette:
    global _cache

    _cache = LyricsCache(cache_dir)

    routes = [
        Route("/api/health", health),
        Route("/fetch-lyrics", fetch_lyrics, methods=["POST"]),
    ]
    middleware = [
        Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"]),
    ]

    return Starlette(routes=routes, middleware=middleware)
