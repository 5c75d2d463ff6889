"""Conversation and message request/response schemas."""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

MAX_MESSAGE_LENGTH = 5000


class ConversationCreate(BaseModel):
    """Request to open (or reopen) a conversation with a seller about an item."""

    item_id: int = Field(..., description="Listing being discussed")
    seller_id: int = Field(..., description="Seller of the listing")

    class Config:
        json_schema_extra = {
            "example": {
                "item_id": 42,
                "seller_id": 9
            }
        }


class MessageCreate(BaseModel):
    """Request to send a message in a conversation."""

    message: str = Field(..., description="Message text, trimmed before storing")

    @field_validator('message')
    @classmethod
    def validate_message(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('message must not be empty')
        if len(v) > MAX_MESSAGE_LENGTH:
            raise ValueError(f'message must be at most {MAX_MESSAGE_LENGTH} characters')
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "message": "Is this still available?"
            }
        }


class ConversationResponse(BaseModel):
    """Conversation as seen by one of its participants."""

    id: int
    item_id: int
    buyer_id: int
    seller_id: int
    item_title: Optional[str] = None
    other_user_name: Optional[str] = None
    last_message: str = ""
    unread_count: int = 0
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    """Message with the sender's display name joined in."""

    id: int
    conversation_id: int
    sender_id: int
    sender_name: Optional[str] = None
    message: str
    read: bool = False
    created_at: datetime


class UnreadSummaryResponse(BaseModel):
    """Total unread messages across the caller's conversations."""

    unread_count: int = Field(default=0)


class DeleteResponse(BaseModel):
    """Response after deleting a conversation."""

    message: str = Field(default="Conversation deleted")
