"""Conversation service: creation, message ledger and unread bookkeeping."""
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from unimarket.models.conversation import Conversation
from unimarket.models.item import Item
from unimarket.models.message import Message
from unimarket.models.user import User


class ConversationError(Exception):
    """Base error for conversation operations. Carries the HTTP status to report."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidConversationRequest(ConversationError):
    """Raised when a request is malformed (e.g. messaging yourself)."""
    status_code = 400


class NotAParticipant(ConversationError):
    """Raised when the caller is neither the buyer nor the seller."""
    status_code = 403


class ResourceNotFound(ConversationError):
    """Raised when a conversation, item or user does not exist."""
    status_code = 404


class ConversationService:
    """Service for conversations between buyers and sellers."""

    def __init__(self, db: Session):
        self.db = db

    def _find_by_participants(self, item_id: int, buyer_id: int, seller_id: int) -> Optional[Conversation]:
        return self.db.query(Conversation).filter(
            Conversation.item_id == item_id,
            Conversation.buyer_id == buyer_id,
            Conversation.seller_id == seller_id
        ).first()

    def get_or_create(self, buyer: User, item_id: int, seller_id: int) -> Tuple[Conversation, bool]:
        """
        Return the unique conversation for (item, buyer, seller).

        Creation is idempotent: if the triple already has a conversation it
        is returned unmodified.

        Args:
            buyer: Authenticated caller, acting as buyer
            item_id: Listing being discussed
            seller_id: Seller being contacted

        Returns:
            Tuple of (conversation, created)

        Raises:
            InvalidConversationRequest: If buyer and seller are the same user,
                or the seller does not own the item
            ResourceNotFound: If the item or seller does not exist
        """
        if buyer.id == seller_id:
            raise InvalidConversationRequest("Cannot start a conversation with yourself")

        item = self.db.query(Item).filter(Item.id == item_id).first()
        if not item:
            raise ResourceNotFound("Item not found")

        seller = self.db.query(User).filter(User.id == seller_id).first()
        if not seller:
            raise ResourceNotFound("Seller not found")

        if item.seller_id != seller_id:
            raise InvalidConversationRequest("Seller does not own this item")

        existing = self._find_by_participants(item_id, buyer.id, seller_id)
        if existing:
            return existing, False

        now = datetime.utcnow()
        conversation = Conversation(
            item_id=item_id,
            buyer_id=buyer.id,
            seller_id=seller_id,
            last_message="",
            unread_count=0,
            created_at=now,
            updated_at=now
        )
        self.db.add(conversation)

        try:
            self.db.commit()
        except IntegrityError:
            # Another request created the same triple first
            self.db.rollback()
            existing = self._find_by_participants(item_id, buyer.id, seller_id)
            if existing is None:
                raise
            return existing, False

        self.db.refresh(conversation)
        return conversation, True

    def get_for_participant(self, conversation_id: int, user_id: int) -> Conversation:
        """
        Load a conversation the caller takes part in.

        Raises:
            ResourceNotFound: If the conversation does not exist
            NotAParticipant: If the caller is neither buyer nor seller
        """
        conversation = self.db.query(Conversation).filter(
            Conversation.id == conversation_id
        ).first()

        if not conversation:
            raise ResourceNotFound("Conversation not found")

        if not conversation.has_participant(user_id):
            raise NotAParticipant("Not authorized to access this conversation")

        return conversation

    def list_for_user(self, user_id: int) -> List[Conversation]:
        """All conversations of a user, most recently active first."""
        return self.db.query(Conversation).filter(
            (Conversation.buyer_id == user_id) | (Conversation.seller_id == user_id)
        ).order_by(Conversation.updated_at.desc(), Conversation.id.desc()).all()

    def send_message(self, conversation_id: int, sender_id: int, text: str) -> Message:
        """
        Append a message and update the conversation's cached state.

        Seller messages bump the buyer's unread counter; buyer messages
        leave it alone. The increment runs in SQL so concurrent sends
        are all counted.

        Args:
            conversation_id: Target conversation
            sender_id: Authenticated caller
            text: Already trimmed, non-empty message text

        Returns:
            The stored Message
        """
        conversation = self.get_for_participant(conversation_id, sender_id)

        message = Message(
            conversation_id=conversation.id,
            sender_id=sender_id,
            message=text,
            read=False,
            created_at=datetime.utcnow()
        )
        self.db.add(message)

        conversation.last_message = text
        conversation.updated_at = message.created_at
        if sender_id == conversation.seller_id:
            conversation.unread_count = Conversation.unread_count + 1

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(message)
        return message

    def list_messages(self, conversation_id: int, user_id: int) -> List[Message]:
        """
        Return a conversation's messages oldest first.

        When the buyer reads, their unread counter drops to zero. Individual
        message ``read`` flags are not touched.
        """
        conversation = self.get_for_participant(conversation_id, user_id)

        messages = self.db.query(Message).filter(
            Message.conversation_id == conversation.id
        ).order_by(Message.id.asc()).all()

        if user_id == conversation.buyer_id and conversation.unread_count:
            conversation.unread_count = 0
            self.db.commit()

        return messages

    def delete(self, conversation_id: int, user_id: int) -> None:
        """Delete a conversation together with all of its messages."""
        conversation = self.get_for_participant(conversation_id, user_id)

        self.db.delete(conversation)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def unread_total(self, user_id: int) -> int:
        """Sum of unread counters on conversations where the user is the buyer."""
        total = self.db.query(func.coalesce(func.sum(Conversation.unread_count), 0)).filter(
            Conversation.buyer_id == user_id
        ).scalar()
        return int(total or 0)
