"""Shared state and failure handling for the client stores."""

from __future__ import annotations

import logging
from typing import Any, Optional

from souq_client.data.graphql_client import (
    GraphQLClient,
    GraphQLClientError,
    GraphQLResponseError,
)

logger = logging.getLogger(__name__)

# Request failures plus malformed payloads
STORE_ERRORS = (GraphQLClientError, AttributeError, KeyError, TypeError, ValueError)


class BaseStore:
    """Client-side state container wrapping a set of GraphQL operations.

    Subclasses keep mirrored DTOs as plain attributes. ``is_loading`` and
    ``error`` describe the last operation the way the UI needs them: the
    error is the message to show the user, or None.
    """

    def __init__(self, client: Optional[GraphQLClient] = None) -> None:
        self.client = client or GraphQLClient()
        self.is_loading = False
        self.error: Optional[str] = None

    def _begin(self) -> None:
        self.is_loading = True
        self.error = None

    def _fail(self, exc: Exception, fallback: str) -> None:
        """Record a failed operation for display."""
        logger.error(f"{type(self).__name__}: {fallback}: {exc}")
        self.error = str(exc) or fallback
        self.is_loading = False

    def clear_error(self) -> None:
        self.error = None


def require(data: dict[str, Any], field: str) -> Any:
    """Return ``data[field]``, raising if the server sent nothing for it."""
    value = data.get(field)
    if value is None:
        raise GraphQLResponseError([{"message": f"No {field} in response"}])
    return value
