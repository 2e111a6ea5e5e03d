"""Tests for the client store: listing, status updates, deletion and navigation."""

import pytest

from clients_finder.core.errors import NotFoundError, ValidationError
from clients_finder.models import Client, EmailHistory, Note
from clients_finder.services.client_filters import ClientFilterParams
from clients_finder.services.client_service import ClientService


class TestListClients:
    def test_newest_first_with_total(self, db, make_client):
        make_client(name="Old")
        make_client(name="Mid")
        make_client(name="New")

        result = ClientService(db).list_clients(ClientFilterParams())

        assert result["success"] is True
        assert result["total"] == 3
        assert [c.name for c in result["clients"]] == ["New", "Mid", "Old"]

    def test_limit_and_offset_keep_full_total(self, db, make_client):
        for i in range(5):
            make_client(name=f"C{i}")

        result = ClientService(db).list_clients(ClientFilterParams(), limit=2, offset=1)

        assert result["total"] == 5
        assert [c.name for c in result["clients"]] == ["C3", "C2"]


class TestSingleClient:
    def test_get_missing_client(self, db):
        with pytest.raises(NotFoundError):
            ClientService(db).get_client("does-not-exist")

    def test_update_status(self, db, make_client):
        client = make_client()

        updated = ClientService(db).update_status(client.id, "LEAD")

        assert updated.status == "LEAD"

    def test_update_status_rejects_unknown_value(self, db, make_client):
        client = make_client()

        with pytest.raises(ValidationError) as exc:
            ClientService(db).update_status(client.id, "WON")

        assert "PENDING, LEAD, CONTACTED, REJECTED, CLOSED" in exc.value.message

    def test_delete_removes_notes_and_history(self, db, make_client):
        client = make_client()
        db.add(Note(client_id=client.id, content="call back"))
        db.add(EmailHistory(client_id=client.id, recipient="a@b.np", status="SENT", method="SMTP"))
        db.commit()

        ClientService(db).delete_client(client.id)

        assert db.query(Client).count() == 0
        assert db.query(Note).count() == 0
        assert db.query(EmailHistory).count() == 0


class TestNavigation:
    def test_next_and_prev(self, db, make_client):
        a = make_client(name="A")
        b = make_client(name="B")
        c = make_client(name="C")
        service = ClientService(db)

        assert service.navigate(b.id, "next", ClientFilterParams()) == c.id
        assert service.navigate(b.id, "prev", ClientFilterParams()) == a.id

    def test_wraps_around(self, db, make_client):
        a = make_client(name="A")
        make_client(name="B")
        c = make_client(name="C")
        service = ClientService(db)

        assert service.navigate(c.id, "next", ClientFilterParams()) == a.id
        assert service.navigate(a.id, "prev", ClientFilterParams()) == c.id

    def test_respects_filters(self, db, make_client):
        a = make_client(name="A", status="LEAD")
        b = make_client(name="B", status="PENDING")
        c = make_client(name="C", status="LEAD")
        service = ClientService(db)

        assert service.navigate(a.id, "next", ClientFilterParams(status="LEAD")) == c.id
        assert service.navigate(b.id, "next", ClientFilterParams(status="LEAD")) == c.id

    def test_unknown_direction_returns_none(self, db, make_client):
        a = make_client()

        assert ClientService(db).navigate(a.id, "sideways", ClientFilterParams()) is None
