"""Initialize database with demo users and listings."""
import sys
from sqlalchemy.orm import Session
from unimarket.database import SessionLocal, engine, Base
from unimarket.middleware.auth import create_access_token
from unimarket.seed import seed_demo_data


def init_database():
    """Create tables, seed demo data and print bearer tokens for it."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()

    try:
        users = seed_demo_data(db)
        if not users:
            print("✓ Database already initialized")
            return

        print(f"✓ Created {len(users)} demo users with listings")

        print("\n" + "="*50)
        print("Demo bearer tokens:")
        print("="*50)
        for user in users:
            print(f"\n{user.name} (id={user.id}, {user.email}):")
            print(f"  {create_access_token(user.id)}")

        print("\nUse a token with curl:")
        print('  curl -H "Authorization: Bearer <token>" http://localhost:8000/api/conversations')
        print("\n" + "="*50)

    except Exception as e:
        print(f"✗ Error initializing database: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    init_database()
