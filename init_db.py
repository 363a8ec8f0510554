"""
Script to initialize the database with tables and seed data.
"""
import logging

from quizdesk.db.base import engine, SessionLocal
from quizdesk.db.init_db import init_db
from quizdesk.models import Base

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def init() -> None:
    """Initialize database."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✅ Database tables created")

    print("Seeding initial data...")
    db = SessionLocal()
    try:
        admin = init_db(db)
        print(f"✅ Admin account: {admin.email}")
    finally:
        db.close()

    print("🎉 Database initialization complete!")


if __name__ == "__main__":
    init()
