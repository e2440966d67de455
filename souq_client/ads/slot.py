"""Resolve what a single ad slot should display."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Union

from souq_client.ads.selector import select_package
from souq_client.data.models import AdPackageInstance
from souq_client.stores.ads import AdsStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomAdDecision:
    """Show a purchased campaign package."""

    placement: str
    instance: AdPackageInstance

    @property
    def campaign_id(self) -> str:
        return self.instance.campaign_id

    @property
    def campaign_package_id(self) -> str:
        return self.instance.campaign_package_id


@dataclass(frozen=True)
class AdSenseDecision:
    """Fall back to the ad network slot."""

    placement: str
    client_id: str
    slot_id: str
    format: str = "horizontal"
    responsive: bool = True


SlotDecision = Union[CustomAdDecision, AdSenseDecision]


class AdSlot:
    """One ad placement on a page.

    Resolution order: a weighted pick among the placement's live custom
    packages, then the ad network's image slot, then nothing. Failures
    are logged and the slot simply stays empty.
    """

    def __init__(
        self,
        placement: str,
        store: AdsStore,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.placement = placement
        self.store = store
        self.rng = rng

    async def resolve(self) -> Optional[SlotDecision]:
        try:
            return await self._resolve()
        except Exception:
            logger.exception(f"Ad slot {self.placement!r} failed to resolve")
            return None

    async def _resolve(self) -> Optional[SlotDecision]:
        await self.store.fetch_all_ads()
        instances = self.store.get_ads_by_placement(self.placement)

        if instances:
            selected = select_package(instances, rng=self.rng)
            if selected is not None:
                return CustomAdDecision(placement=self.placement, instance=selected)

        logger.info(f"No custom ads for placement {self.placement!r}, checking AdSense fallback")
        settings = await self.store.fetch_adsense_settings()
        if settings is None or not settings.client_id:
            logger.info("No AdSense settings available")
            return None

        slot = settings.image_slot
        if slot is None or not slot.enabled or not slot.id:
            logger.info(f"AdSense slot disabled or not configured for {self.placement!r}")
            return None

        return AdSenseDecision(
            placement=self.placement,
            client_id=settings.client_id,
            slot_id=slot.id,
        )

    async def record_impression(self, decision: Optional[SlotDecision]) -> None:
        if isinstance(decision, CustomAdDecision):
            await self.store.track_impression(decision.campaign_id, decision.campaign_package_id)

    async def record_click(self, decision: Optional[SlotDecision]) -> None:
        if isinstance(decision, CustomAdDecision):
            await self.store.track_click(decision.campaign_id, decision.campaign_package_id)
