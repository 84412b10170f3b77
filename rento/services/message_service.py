"""Messaging service: post a message into a caller-owned thread."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from rento.adapters.store.base import AbstractRentoStore, MessageRecord
from rento.core.auth import CurrentUser
from rento.core.errors import NotFoundAppError
from rento.utils.clock import utc_now
from rento.utils.ids import new_id

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(
        self,
        store: AbstractRentoStore,
        *,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._now = now

    async def send_message(self, user: CurrentUser, *, thread_id: str, body: str) -> MessageRecord:
        """Record a message and refresh the thread summary.

        Threads owned by someone else are reported as missing.

        Raises:
            NotFoundAppError: If the thread does not exist or is not the caller's.
        """
        thread = await self._store.get_thread(thread_id)
        if thread is None or thread.owner_id != user.id:
            raise NotFoundAppError(
                code="thread_not_found",
                message="Thread not found.",
                details={"resource": "thread", "resource_id": thread_id},
            )

        now = self._now().isoformat()
        message = await self._store.create_message(
            MessageRecord(id=new_id(), thread_id=thread.id, sender_id=user.id, body=body, created_at=now)
        )
        await self._store.update_thread(
            thread.id,
            {"last_message": body, "unread_count": 0, "updated_at": now},
        )

        logger.info("message.sent", extra={"thread_id": thread.id, "chars": len(body)})
        return message
