"""
Creates a 'Test Client' row pointing at TEST_EMAIL so outreach can be tried
end to end without mailing a real business.

Usage:
    python -m scripts.seed_test_client
"""

import logging
import os

from clients_finder.core.database import Base, SessionLocal, engine
from clients_finder.models import Client, ClientStatus

logger = logging.getLogger(__name__)

TEST_PLACE_ID = "test-client"
DEFAULT_TEST_EMAIL = "test@example.com"


def seed(db, test_email: str):
    """Returns the test client, creating it only when missing."""
    existing = db.query(Client).filter(Client.place_id == TEST_PLACE_ID).first()
    if existing:
        logger.info("Test client already exists.")
        return existing

    client = Client(
        place_id=TEST_PLACE_ID,
        name="Test Client",
        category="Testing",
        address="123 Test Street",
        city="Test City",
        state="TS",
        postcode="12345",
        country="Test Country",
        email=test_email,
        phone="+1-555-0000",
        website="https://test.example.com",
        latitude=0.0,
        longitude=0.0,
        status=ClientStatus.PENDING.value,
        opening_hours="9:00 AM - 5:00 PM",
        facilities="Testing Facility",
        datasource="Manual Test Entry",
    )
    db.add(client)
    db.commit()
    db.refresh(client)

    logger.info(f"🌱 Test client created with email: {test_email} (id {client.id})")
    return client


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed(db, os.getenv("TEST_EMAIL", DEFAULT_TEST_EMAIL))
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
