"""Tests for the test-client seed script."""

from clients_finder.models import Client
from scripts.seed_test_client import TEST_PLACE_ID, seed


class TestSeedTestClient:
    def test_creates_once(self, db):
        first = seed(db, "me@example.com")
        second = seed(db, "other@example.com")

        assert first.id == second.id
        assert first.place_id == TEST_PLACE_ID
        assert first.email == "me@example.com"
        assert first.status == "PENDING"
        assert db.query(Client).count() == 1
