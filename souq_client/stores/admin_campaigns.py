"""Admin CRUD over advertiser campaigns."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from souq_client.config import ADMIN_CAMPAIGNS_TTL, config
from souq_client.data import queries
from souq_client.data.graphql_client import GraphQLClient
from souq_client.data.models import AdCampaign
from souq_client.stores.base import STORE_ERRORS, BaseStore, require

logger = logging.getLogger(__name__)


class AdminAdCampaignsStore(BaseStore):
    """Campaign list for the admin panel.

    Requests carry the admin token. Mutations never raise; they record the
    error and return None (or False for deletes) so the panel can show it.
    """

    def __init__(
        self,
        client: Optional[GraphQLClient] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(client or GraphQLClient(token=config.admin_token))
        self.ad_campaigns: list[AdCampaign] = []
        self.selected_ad_campaign: Optional[AdCampaign] = None
        self.last_fetched: Optional[float] = None
        self.cache_timeout = ADMIN_CAMPAIGNS_TTL
        self._clock = clock

    async def _call(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict:
        return await self.client.request(query, variables or {}, ttl=0)

    def _touch(self) -> None:
        self.is_loading = False
        self.error = None
        self.last_fetched = self._clock()

    def is_cache_valid(self) -> bool:
        return (
            self.last_fetched is not None
            and self._clock() - self.last_fetched < self.cache_timeout
        )

    def invalidate_cache(self) -> None:
        self.last_fetched = None

    async def load_ad_campaigns(self, filter: Optional[dict[str, Any]] = None) -> None:
        self._begin()
        try:
            data = await self._call(queries.GET_ALL_AD_CAMPAIGNS_QUERY, {"filter": filter})
            campaigns = [AdCampaign.from_dict(raw) for raw in data.get("adCampaigns") or []]
        except STORE_ERRORS as e:
            self._fail(e, "Failed to load ad campaigns")
            self.ad_campaigns = []
            return
        self.ad_campaigns = campaigns
        self._touch()

    async def load_ad_campaigns_with_cache(
        self, force_refresh: bool = False, filter: Optional[dict[str, Any]] = None
    ) -> None:
        if not force_refresh and self.ad_campaigns and self.is_cache_valid():
            logger.debug("Using cached ad campaigns")
            return
        await self.load_ad_campaigns(filter)

    async def get_ad_campaign_by_id(self, campaign_id: str) -> Optional[AdCampaign]:
        self._begin()
        try:
            data = await self._call(queries.GET_AD_CAMPAIGN_BY_ID_QUERY, {"id": campaign_id})
            raw = data.get("adCampaign")
            campaign = AdCampaign.from_dict(raw) if raw else None
        except STORE_ERRORS as e:
            self._fail(e, "Failed to load ad campaign")
            return None
        self.selected_ad_campaign = campaign
        self.is_loading = False
        return campaign

    async def create_ad_campaign(self, input: dict[str, Any]) -> Optional[AdCampaign]:
        self._begin()
        try:
            data = await self._call(queries.CREATE_AD_CAMPAIGN_MUTATION, {"input": input})
            campaign = AdCampaign.from_dict(require(data, "createAdCampaign"))
        except STORE_ERRORS as e:
            self._fail(e, "Failed to create ad campaign")
            return None
        self.ad_campaigns = [*self.ad_campaigns, campaign]
        self._touch()
        logger.info(f"Created ad campaign {campaign.id}")
        return campaign

    async def update_ad_campaign(self, input: dict[str, Any]) -> Optional[AdCampaign]:
        self._begin()
        try:
            data = await self._call(queries.UPDATE_AD_CAMPAIGN_MUTATION, {"input": input})
            updated = AdCampaign.from_dict(require(data, "updateAdCampaign"))
        except STORE_ERRORS as e:
            self._fail(e, "Failed to update ad campaign")
            return None
        self.ad_campaigns = [updated if c.id == updated.id else c for c in self.ad_campaigns]
        self._touch()
        return updated

    async def update_campaign_status(self, campaign_id: str, status: str) -> Optional[AdCampaign]:
        self._begin()
        try:
            data = await self._call(
                queries.UPDATE_CAMPAIGN_STATUS_MUTATION,
                {"input": {"id": campaign_id, "status": status}},
            )
            new_status = require(data, "updateCampaignStatus")["status"]
        except STORE_ERRORS as e:
            self._fail(e, "Failed to update campaign status")
            return None

        updated = None
        for campaign in self.ad_campaigns:
            if campaign.id == campaign_id:
                campaign.status = new_status
                updated = campaign
        self._touch()
        return updated

    async def delete_ad_campaign(self, campaign_id: str) -> bool:
        self._begin()
        try:
            await self._call(queries.DELETE_AD_CAMPAIGN_MUTATION, {"input": {"id": campaign_id}})
        except STORE_ERRORS as e:
            self._fail(e, "Failed to delete ad campaign")
            return False
        self.ad_campaigns = [c for c in self.ad_campaigns if c.id != campaign_id]
        self._touch()
        logger.info(f"Deleted ad campaign {campaign_id}")
        return True

    def set_selected_ad_campaign(self, campaign: Optional[AdCampaign]) -> None:
        self.selected_ad_campaign = campaign
