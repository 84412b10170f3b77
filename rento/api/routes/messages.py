from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from rento.api.dependencies import get_message_service
from rento.core.rate_limit import ActionClass, RateLimitedCaller, rate_limit
from rento.schemas.engagement import SendMessageRequest
from rento.services.message_service import MessageService

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", status_code=status.HTTP_204_NO_CONTENT)
async def send_message(
    payload: SendMessageRequest,
    caller: Annotated[RateLimitedCaller, Depends(rate_limit(ActionClass.MESSAGES))],
    service: Annotated[MessageService, Depends(get_message_service)],
) -> None:
    """Post a message into one of the caller's threads.

    Raises:
        NotFoundAppError: 404 if the thread is missing or not the caller's.
    """
    user = caller.consume()
    await service.send_message(user, thread_id=payload.thread_id, body=payload.body)
