"""Database models."""
from unimarket.models.user import User
from unimarket.models.item import Item
from unimarket.models.conversation import Conversation
from unimarket.models.message import Message

__all__ = ["User", "Item", "Conversation", "Message"]
