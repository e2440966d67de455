"""Buyer/seller chat threads, messages and user blocking."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from souq_client.data import queries
from souq_client.data.models import BlockedUser, ChatMessage, ChatThread, ImageUploadUrl
from souq_client.stores.base import STORE_ERRORS, BaseStore, require

logger = logging.getLogger(__name__)


class ChatStore(BaseStore):
    """Chat state. Every call hits the backend; nothing here is cached."""

    def __init__(self, client=None) -> None:
        super().__init__(client)
        self.threads: list[ChatThread] = []
        self.active_thread_id: Optional[str] = None
        self.messages: dict[str, list[ChatMessage]] = {}  # thread id -> messages
        self.unread_count = 0
        self.blocked_user_ids: set[str] = set()
        self.blocked_users: list[BlockedUser] = []

    async def _call(self, query: str, variables: Optional[dict] = None) -> dict:
        return await self.client.request(query, variables or {}, ttl=0)

    async def fetch_my_threads(self) -> None:
        self._begin()
        try:
            data = await self._call(queries.MY_THREADS_QUERY)
            threads = [ChatThread.from_dict(raw) for raw in data.get("myThreads") or []]
        except STORE_ERRORS as e:
            self._fail(e, "Failed to load conversations")
            return
        self.threads = threads
        self.is_loading = False

    async def get_or_create_thread(self, listing_id: str, seller_id: Optional[str] = None) -> str:
        """Open the conversation about a listing. Returns the thread id."""
        self._begin()
        try:
            data = await self._call(
                queries.GET_OR_CREATE_THREAD_MUTATION,
                {"input": {"listingId": listing_id, "sellerId": seller_id}},
            )
            thread = ChatThread.from_dict(require(data, "getOrCreateThread"))
        except STORE_ERRORS as e:
            self._fail(e, "Failed to create conversation")
            raise

        for index, existing in enumerate(self.threads):
            if existing.id == thread.id:
                self.threads[index] = thread
                break
        else:
            self.threads.insert(0, thread)
        self.is_loading = False
        return thread.id

    async def fetch_thread_messages(self, thread_id: str, limit: int = 50) -> None:
        self._begin()
        try:
            data = await self._call(
                queries.THREAD_MESSAGES_QUERY, {"threadId": thread_id, "limit": limit}
            )
            messages = [ChatMessage.from_dict(raw) for raw in data.get("threadMessages") or []]
        except STORE_ERRORS as e:
            self._fail(e, "Failed to load messages")
            return
        self.messages[thread_id] = messages
        self.is_loading = False

    async def send_message(
        self,
        thread_id: str,
        text: Optional[str] = None,
        image_keys: Optional[list[str]] = None,
    ) -> ChatMessage:
        if not (text and text.strip()) and not image_keys:
            raise ValueError("A message needs text or at least one image")

        self.error = None
        try:
            data = await self._call(
                queries.SEND_MESSAGE_MUTATION,
                {"input": {"threadId": thread_id, "text": text, "imageKeys": image_keys}},
            )
            message = ChatMessage.from_dict(require(data, "sendMessage"))
        except STORE_ERRORS as e:
            self._fail(e, "Failed to send message")
            raise

        self.messages.setdefault(thread_id, []).append(message)
        self.threads = [
            replace(t, last_message_at=message.created_at) if t.id == thread_id else t
            for t in self.threads
        ]
        return message

    async def mark_thread_read(self, thread_id: str, message_id: Optional[str] = None) -> None:
        try:
            await self._call(
                queries.MARK_THREAD_READ_MUTATION,
                {"input": {"threadId": thread_id, "messageId": message_id}},
            )
        except STORE_ERRORS as e:
            logger.error(f"Error marking thread {thread_id} as read: {e}")
            return
        await self.fetch_unread_count()

    async def fetch_unread_count(self) -> None:
        try:
            data = await self._call(queries.UNREAD_COUNT_QUERY)
            self.unread_count = int(data.get("unreadCount") or 0)
        except STORE_ERRORS as e:
            logger.error(f"Error fetching unread count: {e}")

    async def delete_message(self, message_id: str) -> None:
        try:
            await self._call(queries.DELETE_MESSAGE_MUTATION, {"input": {"messageId": message_id}})
        except STORE_ERRORS as e:
            self._fail(e, "Failed to delete message")
            raise

        for thread_id, messages in self.messages.items():
            self.messages[thread_id] = [m for m in messages if m.id != message_id]

    async def delete_thread(self, thread_id: str) -> None:
        try:
            await self._call(queries.DELETE_THREAD_MUTATION, {"threadId": thread_id})
        except STORE_ERRORS as e:
            self._fail(e, "Failed to delete conversation")
            raise

        self.threads = [t for t in self.threads if t.id != thread_id]
        if self.active_thread_id == thread_id:
            self.active_thread_id = None
        self.messages.pop(thread_id, None)

    async def edit_message(self, message_id: str, new_text: str) -> None:
        try:
            data = await self._call(
                queries.EDIT_MESSAGE_MUTATION,
                {"input": {"messageId": message_id, "text": new_text}},
            )
            updated = ChatMessage.from_dict(require(data, "editMessage"))
        except STORE_ERRORS as e:
            self._fail(e, "Failed to edit message")
            raise

        for thread_id, messages in self.messages.items():
            self.messages[thread_id] = [updated if m.id == message_id else m for m in messages]

    async def report_thread(
        self,
        reported_user_id: str,
        thread_id: str,
        reason: str,
        details: Optional[str] = None,
    ) -> None:
        try:
            await self._call(
                queries.CREATE_REPORT_MUTATION,
                {
                    "reportedUserId": reported_user_id,
                    "entityType": "thread",
                    "entityId": thread_id,
                    "reason": reason,
                    "details": details or None,
                },
            )
        except STORE_ERRORS as e:
            self._fail(e, "Failed to send report")
            raise

    async def block_user(self, blocked_user_id: str) -> None:
        try:
            await self._call(queries.BLOCK_USER_MUTATION, {"blockedUserId": blocked_user_id})
        except STORE_ERRORS as e:
            self._fail(e, "Failed to block user")
            raise

        self.blocked_user_ids.add(blocked_user_id)
        # The backend hides threads with blocked users
        await self.fetch_my_threads()

    async def unblock_user(self, blocked_user_id: str) -> None:
        try:
            await self._call(queries.UNBLOCK_USER_MUTATION, {"blockedUserId": blocked_user_id})
        except STORE_ERRORS as e:
            self._fail(e, "Failed to unblock user")
            raise

        self.blocked_user_ids.discard(blocked_user_id)
        self.blocked_users = [
            b for b in self.blocked_users if b.blocked_user_id != blocked_user_id
        ]
        await self.fetch_my_threads()

    async def fetch_blocked_users(self) -> None:
        try:
            data = await self._call(queries.MY_BLOCKED_USERS_QUERY)
            blocked = [BlockedUser.from_dict(raw) for raw in data.get("myBlockedUsers") or []]
        except STORE_ERRORS as e:
            self._fail(e, "Failed to load blocked users")
            return
        self.blocked_users = blocked
        self.blocked_user_ids = {b.blocked_user_id for b in blocked}

    def is_user_blocked(self, user_id: str) -> bool:
        return user_id in self.blocked_user_ids

    async def create_image_upload_url(self) -> ImageUploadUrl:
        try:
            data = await self._call(queries.CREATE_IMAGE_UPLOAD_URL_MUTATION)
            return ImageUploadUrl.from_dict(require(data, "createImageUploadUrl"))
        except STORE_ERRORS as e:
            self._fail(e, "Failed to create image upload URL")
            raise

    def set_active_thread(self, thread_id: Optional[str]) -> None:
        self.active_thread_id = thread_id
