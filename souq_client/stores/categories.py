"""Marketplace categories and their filterable attributes."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from souq_client.config import CATEGORIES_TTL
from souq_client.data import queries
from souq_client.data.models import Category
from souq_client.data.session_cache import SessionCache
from souq_client.stores.base import STORE_ERRORS, BaseStore

logger = logging.getLogger(__name__)


class CategoriesStore(BaseStore):
    """Category list loaded once per session.

    Reads go through the shared ``SessionCache`` first, so other stores and
    processes reuse one fetch. A failed load leaves the store uninitialized
    so the next call retries.
    """

    def __init__(self, client=None, session_cache: Optional[SessionCache] = None) -> None:
        super().__init__(client)
        self.session_cache = session_cache or SessionCache()
        self.categories: list[Category] = []
        self.selected_category: Optional[Category] = None
        self.is_initialized = False

    async def fetch_categories(self) -> None:
        if self.is_initialized:
            return

        cached = self.session_cache.get_categories()
        if cached is not None:
            try:
                self.categories = [Category.from_dict(raw) for raw in cached]
            except STORE_ERRORS as e:
                logger.warning(f"Ignoring unreadable cached categories: {e}")
            else:
                self.is_initialized = True
                return

        self._begin()
        try:
            data = await self.client.request(queries.GET_CATEGORIES_QUERY, ttl=CATEGORIES_TTL)
            raw_categories = data.get("categories") or []
            categories = [Category.from_dict(raw) for raw in raw_categories]
        except STORE_ERRORS as e:
            self.categories = []
            self.is_initialized = False
            self._fail(e, "Failed to fetch categories")
            return

        self.session_cache.set_categories(raw_categories)
        self.categories = categories
        self.is_initialized = True
        self.is_loading = False
        logger.info(f"Loaded {len(categories)} categories")

    async def initialize_categories(self) -> None:
        if not self.is_initialized and not self.is_loading:
            await self.fetch_categories()

    def get_category_by_id(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        """Active category with ``slug``; inactive ones are hidden."""
        return next((c for c in self.categories if c.slug == slug and c.is_active), None)

    async def fetch_attributes(self, category_slug: str) -> list[dict[str, Any]]:
        """Filterable attributes of a category, empty on failure."""
        cached = self.session_cache.get_attributes(category_slug)
        if cached is not None:
            return cached

        try:
            data = await self.client.request(
                queries.GET_ATTRIBUTES_BY_CATEGORY_QUERY,
                {"categorySlug": category_slug},
                ttl=CATEGORIES_TTL,
            )
        except STORE_ERRORS as e:
            self._fail(e, f"Failed to fetch attributes for {category_slug}")
            return []

        attributes = data.get("getAttributesByCategorySlug") or []
        self.session_cache.set_attributes(category_slug, attributes)
        return attributes

    def set_categories(self, categories: list[Category]) -> None:
        self.categories = list(categories)
        self.error = None

    def add_category(self, category: Category) -> None:
        self.categories = [*self.categories, category]

    def update_category(self, category_id: str, **updates: Any) -> None:
        self.categories = [
            replace(c, **updates) if c.id == category_id else c for c in self.categories
        ]

    def remove_category(self, category_id: str) -> None:
        self.categories = [c for c in self.categories if c.id != category_id]

    def set_selected_category(self, category: Optional[Category]) -> None:
        self.selected_category = category
