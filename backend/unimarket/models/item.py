"""Item model."""
from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey
from datetime import datetime

from unimarket.database import Base


class Item(Base):
    """A listing (item or service) offered by a seller."""

    __tablename__ = "items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    price = Column(Numeric(10, 2), default=0, nullable=False)
    seller_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Item {self.id} seller={self.seller_id}>"
