"""Purchasable ad packages shown on the pricing page."""

from __future__ import annotations

import logging
from typing import Optional

from souq_client.config import AD_PACKAGES_TTL
from souq_client.data import queries
from souq_client.data.models import AdPackage
from souq_client.stores.base import STORE_ERRORS, BaseStore

logger = logging.getLogger(__name__)


class AdPackagesStore(BaseStore):
    def __init__(self, client=None) -> None:
        super().__init__(client)
        self.packages: list[AdPackage] = []

    async def fetch_active_packages(self) -> None:
        """Load active packages, most expensive first."""
        self._begin()
        try:
            data = await self.client.request(
                queries.GET_ACTIVE_AD_PACKAGES_QUERY, ttl=AD_PACKAGES_TTL
            )
            packages = [AdPackage.from_dict(raw) for raw in data.get("activeAdPackages") or []]
        except STORE_ERRORS as e:
            self._fail(e, "Failed to load ad packages")
            return

        packages.sort(key=lambda p: p.base_price, reverse=True)
        self.packages = packages
        self.is_loading = False
        logger.info(f"Loaded {len(packages)} active ad packages")

    def get_package_by_id(self, package_id: str) -> Optional[AdPackage]:
        return next((p for p in self.packages if p.id == package_id), None)

    def reset(self) -> None:
        self.packages = []
        self.error = None
