"""
Map data caching

Caches assembled MapData per normalized bounding box, in memory and
optionally on disk. Entries are write-once.
"""

import os
import json
import hashlib
import threading
from typing import Dict, Optional
from loguru import logger
from pydantic import ValidationError

from ...models import MapData


class BBoxCache:
    """Write-once MapData cache keyed by bbox"""

    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = cache_dir
        self._entries: Dict[str, MapData] = {}
        self._lock = threading.Lock()

    def get_cache_path(self, key: str) -> Optional[str]:
        """Get cache file path for a bbox key"""
        if not self.cache_dir:
            return None
        cache_hash = hashlib.md5(key.encode()).hexdigest()[:12]
        return os.path.join(self.cache_dir, f"mapdata_{cache_hash}.json")

    def get(self, key: str) -> Optional[MapData]:
        """Cached MapData for a bbox key, as a copy the caller may modify"""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            entry = self._load(key)
            if entry is None:
                return None
            with self._lock:
                entry = self._entries.setdefault(key, entry)
        return entry.model_copy(deep=True)

    def put(self, key: str, data: MapData) -> bool:
        """
        Store MapData under a bbox key

        Returns:
            False when the key already had an entry (the entry is kept)
        """
        with self._lock:
            if key in self._entries:
                logger.debug(f"Cache entry already present for {key}, keeping it")
                return False
            self._entries[key] = data.model_copy(deep=True)
        self._save(key, data)
        return True

    def __contains__(self, key: str) -> bool:
        with self._lock:
            if key in self._entries:
                return True
        path = self.get_cache_path(key)
        return path is not None and os.path.exists(path)

    def _load(self, key: str) -> Optional[MapData]:
        """Load MapData from disk if present"""
        cache_path = self.get_cache_path(key)
        if not cache_path or not os.path.exists(cache_path):
            return None
        try:
            with open(cache_path, 'r', encoding='utf-8') as f:
                payload = json.load(f)
            data = MapData.model_validate(payload["data"])
            logger.info(f"Loaded map data from cache: {cache_path}")
            return data
        except (OSError, ValueError, KeyError, ValidationError) as e:
            logger.warning(f"Failed to load cache {cache_path}: {e}")
            return None

    def _save(self, key: str, data: MapData):
        """Save MapData to disk"""
        cache_path = self.get_cache_path(key)
        if not cache_path or os.path.exists(cache_path):
            return
        try:
            os.makedirs(os.path.dirname(cache_path), exist_ok=True)
            with open(cache_path, 'w', encoding='utf-8') as f:
                json.dump({"bbox": key, "data": data.model_dump(mode="json")}, f, ensure_ascii=False)
            logger.info(f"Saved map data to cache: {cache_path}")
        except OSError as e:
            logger.warning(f"Failed to save cache {cache_path}: {e}")
