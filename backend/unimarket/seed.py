"""Demo users and listings for local development."""
from typing import List

from sqlalchemy.orm import Session

from unimarket.models import User, Item

DEMO_USERS = [
    {"name": "Admin", "email": "admin@unimarket.test", "role": "admin", "is_verified": True},
    {"name": "Aye Chan", "email": "aye@ait.asia", "is_verified": True},
    {"name": "Somchai", "email": "somchai@ait.asia"},
    {"name": "Priya", "email": "priya@ait.asia"},
]

# (title, price, index of the seller in DEMO_USERS)
DEMO_ITEMS = [
    ("Desk lamp", 250, 1),
    ("Calculus textbook", 400, 1),
    ("Bicycle", 2500, 2),
    ("Thai cooking lessons", 300, 3),
]


def seed_demo_data(db: Session) -> List[User]:
    """
    Insert demo users and items if the database has no users yet.

    Returns:
        The users created, or an empty list if the database was not empty
    """
    if db.query(User).first():
        return []

    users = [User(**fields) for fields in DEMO_USERS]
    db.add_all(users)
    db.flush()

    db.add_all([
        Item(title=title, price=price, seller_id=users[seller].id)
        for title, price, seller in DEMO_ITEMS
    ])
    db.commit()

    for user in users:
        db.refresh(user)
    return users
