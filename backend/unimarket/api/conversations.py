"""Conversation endpoints used by the chat widget.

Buyers open a conversation with a seller about an item, both sides post
messages, and the buyer's unread badge is cleared when they read the thread.
"""
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from typing import List, Optional
import redis

from unimarket.config import get_settings
from unimarket.database import get_db
from unimarket.middleware.auth import get_current_user
from unimarket.middleware.logging import get_logger
from unimarket.models.conversation import Conversation
from unimarket.models.message import Message
from unimarket.models.user import User
from unimarket.schemas.conversation import (
    ConversationCreate,
    ConversationResponse,
    DeleteResponse,
    MessageCreate,
    MessageResponse,
    UnreadSummaryResponse,
)
from unimarket.services.conversations import ConversationService
from unimarket.services.rate_limiter import RateLimiter, RateLimitExceeded

router = APIRouter(prefix="/api/conversations")
settings = get_settings()
logger = get_logger()

# Connections are opened lazily on first command
redis_client = redis.from_url(settings.redis_url)
message_rate_limiter = RateLimiter(
    redis_client,
    limit=settings.message_rate_limit,
    window=settings.message_rate_limit_window
)


def get_message_rate_limiter() -> Optional[RateLimiter]:
    """Dependency returning the send limiter, or None when disabled."""
    if not settings.message_rate_limit_enabled:
        return None
    return message_rate_limiter


def conversation_view(conversation: Conversation, viewer_id: int) -> ConversationResponse:
    """Join item title and counterpart name onto a conversation for one viewer."""
    counterpart = conversation.counterpart_of(viewer_id)
    # Only the buyer has an unread counter
    unread = conversation.unread_count if viewer_id == conversation.buyer_id else 0

    return ConversationResponse(
        id=conversation.id,
        item_id=conversation.item_id,
        buyer_id=conversation.buyer_id,
        seller_id=conversation.seller_id,
        item_title=conversation.item.title if conversation.item else None,
        other_user_name=counterpart.name if counterpart else None,
        last_message=conversation.last_message or "",
        unread_count=unread,
        created_at=conversation.created_at,
        updated_at=conversation.updated_at
    )


def message_view(message: Message) -> MessageResponse:
    """Join the sender's display name onto a message."""
    return MessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        sender_id=message.sender_id,
        sender_name=message.sender.name if message.sender else None,
        message=message.message,
        read=message.read,
        created_at=message.created_at
    )


@router.get("", response_model=List[ConversationResponse])
async def list_conversations(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the caller's conversations, most recently active first."""
    conversations = ConversationService(db).list_for_user(user.id)
    return [conversation_view(c, user.id) for c in conversations]


@router.post("", response_model=ConversationResponse)
async def create_conversation(
    payload: ConversationCreate,
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Open a conversation with a seller about an item.

    Idempotent: asking again for the same item and seller returns the
    existing conversation (200) instead of creating another one (201).
    """
    conversation, created = ConversationService(db).get_or_create(
        user, payload.item_id, payload.seller_id
    )

    logger.info(
        "conversation_created" if created else "conversation_reused",
        conversation_id=conversation.id,
        item_id=conversation.item_id,
        buyer_id=conversation.buyer_id,
        seller_id=conversation.seller_id
    )

    response.status_code = 201 if created else 200
    return conversation_view(conversation, user.id)


@router.get("/unread-count", response_model=UnreadSummaryResponse)
async def get_unread_count(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Total unread messages for the caller's badge."""
    return UnreadSummaryResponse(unread_count=ConversationService(db).unread_total(user.id))


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    conversation_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get a conversation's messages, oldest first.

    Reading as the buyer resets the conversation's unread count.
    """
    messages = ConversationService(db).list_messages(conversation_id, user.id)

    logger.info(
        "conversation_read",
        conversation_id=conversation_id,
        user_id=user.id,
        message_count=len(messages)
    )

    return [message_view(m) for m in messages]


@router.post("/{conversation_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    conversation_id: int,
    payload: MessageCreate,
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    rate_limiter: Optional[RateLimiter] = Depends(get_message_rate_limiter)
):
    """Post a message to a conversation the caller takes part in."""
    service = ConversationService(db)
    # Authorize before counting against the limit
    service.get_for_participant(conversation_id, user.id)

    if rate_limiter is not None:
        try:
            remaining = rate_limiter.check(user.id)
        except RateLimitExceeded as e:
            logger.warning("message_rate_limited", user_id=user.id, limit=e.limit, window=e.window)
            raise HTTPException(
                status_code=429,
                detail=str(e),
                headers={"X-RateLimit-Limit": str(e.limit), "X-RateLimit-Remaining": "0"}
            )
        except redis.RedisError as e:
            # Limiter unavailable: let the message through
            logger.warning("message_rate_limit_unavailable", user_id=user.id, error=str(e))
        else:
            response.headers["X-RateLimit-Limit"] = str(rate_limiter.limit)
            response.headers["X-RateLimit-Remaining"] = str(remaining)

    message = service.send_message(conversation_id, user.id, payload.message)

    logger.info(
        "message_sent",
        conversation_id=conversation_id,
        message_id=message.id,
        sender_id=user.id,
        message_length=len(message.message)
    )

    return message_view(message)


@router.delete("/{conversation_id}", response_model=DeleteResponse)
async def delete_conversation(
    conversation_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a conversation and all of its messages."""
    ConversationService(db).delete(conversation_id, user.id)

    logger.info("conversation_deleted", conversation_id=conversation_id, user_id=user.id)

    return DeleteResponse()
