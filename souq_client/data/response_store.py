"""JSON-file persistence for cached GraphQL responses."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

from souq_client.config import config

logger = logging.getLogger(__name__)


class ResponseStore:
    """Persists cached GraphQL responses across restarts.

    Entries are kept as ``{key: {"data", "stored_at", "ttl"}}`` in one JSON
    file. Writes only touch memory; ``flush()`` writes the file when
    something changed, so callers decide when the blocking I/O happens.
    The store is a warm-start layer only: any I/O or decode problem is
    logged and treated as an empty store.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or Path(config.data_dir) / "graphql_cache.json"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._entries = self._read()
        self._dirty = False

    def _read(self) -> dict[str, dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load cached responses: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    @property
    def dirty(self) -> bool:
        return self._dirty

    def load(self, now: float) -> dict[str, tuple[Any, float, float]]:
        """Return non-expired entries as ``{key: (data, stored_at, ttl)}``."""
        fresh = {}
        for key, entry in self._entries.items():
            try:
                stored_at = float(entry["stored_at"])
                ttl = float(entry["ttl"])
            except (KeyError, TypeError, ValueError):
                continue
            if now - stored_at <= ttl:
                fresh[key] = (entry.get("data"), stored_at, ttl)
        return fresh

    def save(self, key: str, data: Any, stored_at: float, ttl: float) -> None:
        self._entries[key] = {"data": data, "stored_at": stored_at, "ttl": ttl}
        self._dirty = True

    def discard(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            self._dirty = True

    def _serialize(self) -> Optional[str]:
        try:
            return json.dumps(self._entries)
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to encode cached responses: {e}")
            return None

    def _write(self, payload: str) -> bool:
        try:
            self.path.write_text(payload, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to save cached responses: {e}")
            return False
        return True

    def flush(self) -> None:
        """Write pending changes to disk, blocking the caller."""
        if not self._dirty:
            return
        payload = self._serialize()
        if payload is not None and self._write(payload):
            self._dirty = False

    async def flush_async(self) -> None:
        """Write pending changes to disk from a worker thread."""
        if not self._dirty:
            return
        payload = self._serialize()
        if payload is None:
            return
        # Entries saved while the write is in flight mark the store dirty again
        self._dirty = False
        if not await asyncio.to_thread(self._write, payload):
            self._dirty = True
            return
        logger.debug(f"Flushed {len(self._entries)} cached responses to {self.path}")

    def clear(self) -> None:
        self._entries = {}
        self._dirty = False
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to clear cached responses: {e}")
