"""Public ads store: active campaigns, placement lookup and tracking."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

import aiohttp

from souq_client.config import ADSENSE_TTL, ADS_TTL, config
from souq_client.data import queries
from souq_client.data.graphql_client import GraphQLClient
from souq_client.data.models import (
    DEFAULT_PRIORITY,
    AdCampaign,
    AdPackageInstance,
    AdSenseSettings,
)
from souq_client.stores.base import STORE_ERRORS, BaseStore

logger = logging.getLogger(__name__)


class AdMediaType(Enum):
    """Ad media types matching the backend enum."""

    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class AdEvent(Enum):
    IMPRESSION = "impression"
    CLICK = "click"


class AdsStore(BaseStore):
    """Loads every active campaign once and serves placements locally.

    Tracking beacons go to the site's tracking route rather than GraphQL and
    never raise: a lost impression must not break ad display.
    """

    def __init__(
        self,
        client: Optional[GraphQLClient] = None,
        session: Optional[aiohttp.ClientSession] = None,
        tracking_url: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(client)
        self.all_ads: list[AdCampaign] = []
        self.all_ads_fetched_at: Optional[float] = None
        self.ads_by_type: dict[AdMediaType, list[AdCampaign]] = {t: [] for t in AdMediaType}
        self.adsense_settings: Optional[AdSenseSettings] = None

        self.tracking_url = tracking_url or config.tracking_url
        self._session = session
        self._owns_session = session is None
        self._clock = clock

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session for tracking beacons."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=10),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the tracking session if we own it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def fetch_all_ads(self) -> list[AdCampaign]:
        """Fetch all active campaigns, reusing them for ``ADS_TTL`` seconds."""
        if (
            self.all_ads
            and self.all_ads_fetched_at is not None
            and self._clock() - self.all_ads_fetched_at < ADS_TTL
        ):
            return self.all_ads

        self._begin()
        try:
            data = await self.client.request(queries.GET_ALL_ACTIVE_ADS_QUERY, ttl=ADS_TTL)
            ads = [AdCampaign.from_dict(raw) for raw in data.get("getAllActiveAds") or []]
        except STORE_ERRORS as e:
            self._fail(e, "Failed to load ads")
            return []

        self.all_ads = ads
        self.all_ads_fetched_at = self._clock()
        self.is_loading = False
        logger.info(f"Loaded {len(ads)} active ad campaigns")
        return ads

    def get_ads_by_placement(
        self, placement: str, now: Optional[datetime] = None
    ) -> list[AdPackageInstance]:
        """Expand loaded campaigns into package instances live in ``placement``."""
        now = now or datetime.now(timezone.utc)
        instances = []

        for campaign in self.all_ads:
            if not campaign.package_breakdown:
                continue
            for package in campaign.package_breakdown.packages:
                if package.start_date is None or package.end_date is None:
                    continue
                if package.placement != placement:
                    continue
                if not package.start_date <= now <= package.end_date:
                    continue
                instances.append(
                    AdPackageInstance(
                        campaign_id=campaign.id,
                        campaign_package_id=package.package_id,
                        campaign_name=campaign.campaign_name,
                        priority=campaign.priority or DEFAULT_PRIORITY,
                        pacing_mode=campaign.pacing_mode,
                        impressions_purchased=campaign.impressions_purchased,
                        impressions_delivered=campaign.impressions_delivered,
                        end_date=package.end_date,
                        package=package,
                    )
                )

        return instances

    async def fetch_ads_by_type(self, ad_type: AdMediaType) -> list[AdCampaign]:
        """Legacy per-media-type lookup, kept for older placements."""
        if self.ads_by_type[ad_type]:
            return self.ads_by_type[ad_type]

        self._begin()
        try:
            data = await self.client.request(
                queries.GET_ACTIVE_ADS_BY_TYPE_QUERY,
                # Backend stores the type in lower case
                {"adType": ad_type.value.lower()},
                ttl=ADS_TTL,
            )
            ads = [AdCampaign.from_dict(raw) for raw in data.get("getActiveAdsByType") or []]
        except STORE_ERRORS as e:
            self._fail(e, f"Failed to load {ad_type.value} ads")
            return []

        self.ads_by_type[ad_type] = ads
        self.is_loading = False
        return ads

    async def fetch_adsense_settings(self) -> Optional[AdSenseSettings]:
        """Fallback ad network settings, or None if unavailable."""
        if self.adsense_settings is not None:
            return self.adsense_settings

        try:
            data = await self.client.request(queries.GET_ADSENSE_SETTINGS_QUERY, ttl=ADSENSE_TTL)
            raw = data.get("getAdSenseSettings")
            settings = AdSenseSettings.from_dict(raw) if raw else None
        except STORE_ERRORS as e:
            logger.error(f"Failed to fetch AdSense settings: {e}")
            return None

        self.adsense_settings = settings
        return settings

    async def track_impression(
        self, campaign_id: str, campaign_package_id: Optional[str] = None
    ) -> None:
        await self._track(AdEvent.IMPRESSION, campaign_id, campaign_package_id)

    async def track_click(
        self, campaign_id: str, campaign_package_id: Optional[str] = None
    ) -> None:
        await self._track(AdEvent.CLICK, campaign_id, campaign_package_id)

    async def _track(
        self, event: AdEvent, campaign_id: str, campaign_package_id: Optional[str]
    ) -> None:
        payload = {
            "campaignId": campaign_id,
            "campaignPackageId": campaign_package_id,
            "eventType": event.value,
        }
        try:
            session = await self._get_session()
            async with session.post(self.tracking_url, json=payload) as response:
                if response.status >= 400:
                    logger.warning(
                        f"Ad {event.value} tracking for {campaign_id} returned {response.status}"
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Ad {event.value} tracking for {campaign_id} failed: {e}")
