"""Pydantic schemas for request/response validation."""
from unimarket.schemas.conversation import (
    ConversationCreate,
    ConversationResponse,
    DeleteResponse,
    MessageCreate,
    MessageResponse,
    UnreadSummaryResponse,
)

__all__ = [
    "ConversationCreate",
    "ConversationResponse",
    "DeleteResponse",
    "MessageCreate",
    "MessageResponse",
    "UnreadSummaryResponse",
]
