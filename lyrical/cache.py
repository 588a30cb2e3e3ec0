"""Lyrics cache — one .lrc file per normalized search query."""
import json
import logging
import re
from pathlib import Path
from typing import Optional

from . import config

logger = logging.getLogger(__name__)


def normalize_query(query: str) -> str:
    return query.strip().lower()


def _slugify(text: str) -> str:
    """Convert a normalized query to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text)
    slug = re.sub(r"\s+", "-", slug)
    slug = slug.strip("-")
    return slug


class LyricsCache:
    def __init__(self, cache_dir: Optional[Path] = None):
        self.cache_dir = Path(cache_dir) if cache_dir is not None else config.CACHE_DIR

    def path_for(self, query: str) -> Optional[Path]:
        slug = _slugify(normalize_query(query))
        if not slug:
            return None
        return self.cache_dir / f"{slug}.lrc"

    def get(self, query: str) -> Optional[str]:
        path = self.path_for(query)
        if path is None or not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Cache read failed for %s: %s", path.name, e)
            return None

    def put(self, query: str, lyrics: str) -> Optional[Path]:
        """Atomic write — write to tmp then replace."""
        path = self.path_for(query)
        if path is None:
            return None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".tmp")
            tmp.write_text(lyrics, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            logger.warning("Cache write failed for %s: %s", path.name, e)
            return None
        return path

    def entries(self) -> list[Path]:
        if not self.cache_dir.exists():
            return []
        return sorted(self.cache_dir.glob("*.lrc"))

    def bundle(self, output_path: Optional[Path] = None) -> Path:
        """Export every cached file into one JSON object {filename: lyrics}."""
        output_path = Path(output_path) if output_path is not None else config.BUNDLE_FILE
        data = {p.name: p.read_text(encoding="utf-8") for p in self.entries()}
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Bundled %d lyric files into %s", len(data), output_path)
        return output_path
