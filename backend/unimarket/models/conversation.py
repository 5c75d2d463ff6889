"""Conversation model."""
from sqlalchemy import (
    Column, Integer, Text, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from unimarket.database import Base


class Conversation(Base):
    """Thread between one buyer and one seller about one item."""

    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint("item_id", "buyer_id", "seller_id", name="uq_conversation_item_buyer_seller"),
        CheckConstraint("buyer_id <> seller_id", name="ck_conversation_distinct_participants"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    buyer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Cache of the newest message text for list views
    last_message = Column(Text, default="", nullable=False)
    # Seller messages the buyer has not seen yet
    unread_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    item = relationship("Item")
    buyer = relationship("User", foreign_keys=[buyer_id])
    seller = relationship("User", foreign_keys=[seller_id])
    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.id",
    )

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.buyer_id, self.seller_id)

    def counterpart_of(self, user_id: int):
        """Return the other participant as seen by ``user_id``."""
        return self.seller if user_id == self.buyer_id else self.buyer

    def __repr__(self):
        return f"<Conversation {self.id} item={self.item_id} buyer={self.buyer_id} seller={self.seller_id}>"
