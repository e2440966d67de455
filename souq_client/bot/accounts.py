"""Per-user Souq accounts for the Discord bot.

Each Discord user links their own Souq API token. Bids and wishlist calls
for that user go through a GraphQL client carrying their token, with its
own stores, so one user's wishlist never answers for another's.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Optional

import httpx

from souq_client.config import config
from souq_client.data.graphql_client import GraphQLClient
from souq_client.stores.bids import BidsStore
from souq_client.stores.wishlist import WishlistStore

logger = logging.getLogger(__name__)


@dataclass
class LinkedAccount:
    user_id: int
    token: str


class AccountStore:
    """JSON file of Discord user id to Souq API token."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or Path(config.data_dir) / "accounts.json"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._accounts: dict[int, LinkedAccount] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            self._accounts = {}
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            accounts = [LinkedAccount(**item) for item in data]
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Failed to load linked accounts: {e}")
            accounts = []
        self._accounts = {account.user_id: account for account in accounts}

    def _save(self) -> None:
        payload = [asdict(account) for account in self._accounts.values()]
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def link(self, user_id: int, token: str) -> None:
        self._accounts[user_id] = LinkedAccount(user_id=user_id, token=token)
        self._save()

    def unlink(self, user_id: int) -> bool:
        if self._accounts.pop(user_id, None) is None:
            return False
        self._save()
        return True

    def get_token(self, user_id: int) -> Optional[str]:
        account = self._accounts.get(user_id)
        return account.token if account else None


@dataclass
class UserSession:
    client: GraphQLClient
    bids: BidsStore
    wishlist: WishlistStore


class UserSessions:
    """Lazily built per-user clients and stores.

    Sessions share one ``httpx.AsyncClient`` and differ only in the bearer
    token and the cache, so nothing cached for one user is served to another.
    """

    def __init__(
        self,
        accounts: AccountStore,
        http: Optional[httpx.AsyncClient] = None,
        client_factory: Optional[Callable[[str], GraphQLClient]] = None,
    ) -> None:
        self.accounts = accounts
        self._http = http
        self._client_factory = client_factory or self._build_client
        self._sessions: dict[int, UserSession] = {}

    def _build_client(self, token: str) -> GraphQLClient:
        return GraphQLClient(token=token, client=self._http)

    def get(self, user_id: int) -> Optional[UserSession]:
        """Return the session for ``user_id``, or None if they have not linked an account."""
        session = self._sessions.get(user_id)
        if session is not None:
            return session
        token = self.accounts.get_token(user_id)
        if not token:
            return None
        client = self._client_factory(token)
        session = UserSession(client=client, bids=BidsStore(client), wishlist=WishlistStore(client))
        self._sessions[user_id] = session
        logger.info(f"Opened Souq session for user {user_id}")
        return session

    async def forget(self, user_id: int) -> None:
        session = self._sessions.pop(user_id, None)
        if session is not None:
            await session.client.close()

    async def close(self) -> None:
        for user_id in list(self._sessions):
            await self.forget(user_id)
