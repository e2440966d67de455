"""Shared session cache coordinating category data between stores."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional

from souq_client.config import config

logger = logging.getLogger(__name__)

CATEGORIES_TTL = 30 * 60  # categories rarely change
ATTRIBUTES_TTL = 5 * 60
AGGREGATIONS_TTL = 2 * 60  # aggregations follow listing churn


class SessionCache:
    """TTL cache for categories, per-category attributes and aggregations.

    Everything lives in a single JSON document on disk so separate stores
    (and separate processes) see the same data. Failing to read or write
    the file is never fatal; the cache just behaves as empty.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path = path or Path(config.data_dir) / "session_cache.json"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._clock = clock

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load shared session data: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, Any]) -> None:
        try:
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save shared session data: {e}")

    def _fresh(self, entry: Optional[dict[str, Any]], ttl: float) -> bool:
        if not entry:
            return False
        return self._clock() - entry.get("timestamp", 0) <= ttl

    # Categories

    def get_categories(self) -> Optional[list[Any]]:
        entry = self._load().get("categories")
        if not self._fresh(entry, CATEGORIES_TTL):
            return None
        logger.debug("Restored categories from session cache")
        return entry["data"]

    def set_categories(self, categories: list[Any]) -> None:
        data = self._load()
        data["categories"] = {"data": categories, "timestamp": self._clock()}
        self._save(data)

    # Attributes per category

    def get_attributes(self, category_slug: str) -> Optional[list[Any]]:
        entry = self._load().get("attributes", {}).get(category_slug)
        if not self._fresh(entry, ATTRIBUTES_TTL):
            return None
        logger.debug(f"Restored attributes for {category_slug} from session cache")
        return entry["data"]

    def set_attributes(self, category_slug: str, attributes: list[Any]) -> None:
        data = self._load()
        data.setdefault("attributes", {})[category_slug] = {
            "data": attributes,
            "timestamp": self._clock(),
        }
        self._save(data)

    # Aggregations per category, keyed by the filters that produced them

    def get_aggregations(self, category_slug: str, filters: dict[str, Any]) -> Optional[Any]:
        entry = self._load().get("aggregations", {}).get(category_slug)
        if not entry or entry.get("filter_hash") != self.create_filter_hash(filters):
            return None
        if not self._fresh(entry, AGGREGATIONS_TTL):
            return None
        return entry["data"]

    def set_aggregations(
        self, category_slug: str, filters: dict[str, Any], aggregations: Any
    ) -> None:
        data = self._load()
        data.setdefault("aggregations", {})[category_slug] = {
            "data": aggregations,
            "filter_hash": self.create_filter_hash(filters),
            "timestamp": self._clock(),
        }
        self._save(data)

    @staticmethod
    def create_filter_hash(filters: dict[str, Any]) -> str:
        """Stable short hash of a filter mapping, independent of key order."""
        encoded = json.dumps(filters, sort_keys=True, separators=(",", ":"), default=str)
        return hashlib.sha256(encoded.encode("utf-8")).hexdigest()[:16]

    # Maintenance

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to clear shared session data: {e}")

    def clear_category(self, category_slug: str) -> None:
        data = self._load()
        data.get("attributes", {}).pop(category_slug, None)
        data.get("aggregations", {}).pop(category_slug, None)
        self._save(data)

    def stats(self) -> dict[str, Any]:
        data = self._load()
        try:
            total_size = self.path.stat().st_size if self.path.exists() else 0
        except OSError:
            total_size = 0
        return {
            "categories": "categories" in data,
            "attributes_count": len(data.get("attributes", {})),
            "aggregations_count": len(data.get("aggregations", {})),
            "total_size": total_size,
        }
