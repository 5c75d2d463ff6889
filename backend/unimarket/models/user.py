"""User model."""
from sqlalchemy import Column, String, Integer, Boolean, DateTime
from datetime import datetime

from unimarket.database import Base


class User(Base):
    """Marketplace member. Read-only from the messaging side."""

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(20), default="user", nullable=False)  # "user" or "admin"
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
