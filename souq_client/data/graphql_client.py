"""Async GraphQL client with a client-side TTL cache and request dedupe."""

from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from souq_client.config import config
from souq_client.data.response_store import ResponseStore

logger = logging.getLogger(__name__)

USER_AGENT = "souq-client/0.1"

_WHITESPACE = re.compile(r"\s+")


class GraphQLClientError(Exception):
    """Base GraphQL client error."""


class GraphQLTransportError(GraphQLClientError):
    """Raised when the endpoint cannot be reached or answers with an HTTP error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GraphQLResponseError(GraphQLClientError):
    """Raised when the response carries a GraphQL ``errors`` array."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        first = errors[0] if errors else {}
        message = first.get("message") if isinstance(first, dict) else str(first)
        super().__init__(message or "Unknown GraphQL error")


@dataclass
class CacheEntry:
    data: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


def make_cache_key(query: str, variables: Optional[dict[str, Any]] = None) -> str:
    """Build a cache key from the whitespace-normalised query and its variables."""
    normalized = _WHITESPACE.sub(" ", query).strip()
    return json.dumps(
        {"query": normalized, "variables": variables or {}},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )


class GraphQLClient:
    """Async client for the marketplace GraphQL endpoint.

    Successful query responses are cached per (query, variables) for a TTL,
    and identical requests issued while one is in flight share its result.
    A ``ttl`` of zero or less bypasses both, which is what mutations use.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        default_ttl: Optional[float] = None,
        response_store: Optional[ResponseStore] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize client with optional shared ``httpx.AsyncClient``.

        Args:
            endpoint: GraphQL URL. Uses config if None.
            token: Bearer token sent with every request. Uses config if None.
            client: Shared HTTP client; a private one is created otherwise.
            default_ttl: Cache lifetime in seconds. Uses config if None.
            response_store: Optional persistent layer for cached responses.
            clock: Time source, in seconds.
        """
        self.endpoint = endpoint or config.graphql_endpoint
        self.token = config.api_token if token is None else token
        self.default_ttl = config.cache_ttl_seconds if default_ttl is None else default_ttl
        self._client = client
        self._owns_client = client is None
        self._clock = clock
        self._store = response_store
        self._cache: dict[str, CacheEntry] = {}
        self._pending: dict[str, asyncio.Task] = {}
        self._cleanup_task: Optional[asyncio.Task] = None

        if self._store is not None:
            for key, (data, stored_at, ttl) in self._store.load(self._clock()).items():
                self._cache[key] = CacheEntry(data=data, stored_at=stored_at, ttl=ttl)
            logger.info(f"Restored {len(self._cache)} cached GraphQL responses")

    async def __aenter__(self) -> GraphQLClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=config.request_timeout_seconds,
                headers={"User-Agent": USER_AGENT},
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Stop background cleanup and close the HTTP client if we own it."""
        await self.stop_cleanup()
        await self.flush()
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def request(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
        ttl: Optional[float] = None,
    ) -> dict[str, Any]:
        """Execute a query or mutation and return its ``data`` object.

        Args:
            query: GraphQL document.
            variables: Operation variables.
            ttl: Cache lifetime in seconds. Default TTL if None, no caching if <= 0.

        Raises:
            GraphQLTransportError: network failure or HTTP error status.
            GraphQLResponseError: the response carried GraphQL errors.
        """
        variables = variables or {}
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            return await self._send(query, variables)

        key = make_cache_key(query, variables)
        cached = self._cache.get(key)
        if cached is not None and not cached.is_expired(self._clock()):
            logger.debug(f"Cache hit for {key[:80]}")
            return cached.data

        pending = self._pending.get(key)
        if pending is not None:
            logger.debug(f"Joining in-flight request for {key[:80]}")
            return await asyncio.shield(pending)

        logger.debug(f"Cache miss for {key[:80]}")
        task = asyncio.create_task(self._send(query, variables))
        self._pending[key] = task
        task.add_done_callback(lambda done: self._settle(key, ttl, done))
        return await asyncio.shield(task)

    def _settle(self, key: str, ttl: float, task: asyncio.Task) -> None:
        """Drop the pending entry and cache the result if the request succeeded."""
        self._pending.pop(key, None)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug(f"Not caching failed request for {key[:80]}: {error}")
            return
        entry = CacheEntry(data=task.result(), stored_at=self._clock(), ttl=ttl)
        self._cache[key] = entry
        if self._store is not None:
            self._store.save(key, entry.data, entry.stored_at, entry.ttl)

    async def _send(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        client = self._get_client()
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await client.post(
                self.endpoint,
                json={"query": query, "variables": variables},
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise GraphQLTransportError(f"GraphQL request failed: {exc}") from exc

        if response.status_code >= 400:
            raise GraphQLTransportError(
                f"GraphQL request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise GraphQLTransportError("GraphQL endpoint returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise GraphQLTransportError("GraphQL endpoint returned unexpected payload")

        errors = payload.get("errors")
        if errors:
            raise GraphQLResponseError(errors)

        return payload.get("data") or {}

    def invalidate(self, fragment: str) -> int:
        """Drop cached responses whose key contains ``fragment``."""
        keys = [key for key in self._cache if fragment in key]
        for key in keys:
            del self._cache[key]
            if self._store is not None:
                self._store.discard(key)
        if keys:
            logger.debug(f"Invalidated {len(keys)} cached responses matching {fragment!r}")
        return len(keys)

    def cleanup(self) -> int:
        """Remove expired entries. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._cache.items() if entry.is_expired(now)]
        for key in expired:
            del self._cache[key]
            if self._store is not None:
                self._store.discard(key)
        return len(expired)

    def clear(self) -> None:
        """Clear all cached responses."""
        self._cache.clear()
        if self._store is not None:
            self._store.clear()

    async def flush(self) -> None:
        """Persist cached responses to the response store, if any."""
        if self._store is not None:
            await self._store.flush_async()

    def stats(self) -> dict[str, int]:
        return {"size": len(self._cache), "pending": len(self._pending)}

    def start_cleanup(self, interval: Optional[float] = None) -> None:
        """Start periodic removal of expired entries."""
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.create_task(
            self._cleanup_loop(interval or config.cache_cleanup_seconds)
        )

    async def stop_cleanup(self) -> None:
        if self._cleanup_task is None:
            return
        self._cleanup_task.cancel()
        try:
            await self._cleanup_task
        except asyncio.CancelledError:
            pass
        self._cleanup_task = None

    async def _cleanup_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            removed = self.cleanup()
            await self.flush()
            logger.debug(f"Cache cleanup removed {removed} entries, stats: {self.stats()}")
