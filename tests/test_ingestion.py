"""Tests for the places auto-fetch worker.

The Geoapify client is replaced by a MagicMock whose fetch_places serves
canned pages, so runs are fast and deterministic.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from clients_finder.core.errors import ConfigurationError, NotFoundError, UpstreamError
from clients_finder.models import AutomationJob, Client
from clients_finder.workers.places.geoapify_client import GeoapifyClient
from clients_finder.workers.places.locations import CATEGORIES, NEPAL_LOCATIONS, get_categories, get_locations
from clients_finder.workers.places.main_worker import run_auto_fetch, store_places
from clients_finder.workers.places.transformers import map_place


def feature(place_id, **props):
    properties = {"place_id": place_id, "name": f"Place {place_id}", "lat": 27.7, "lon": 85.3}
    properties.update(props)
    return {"type": "Feature", "properties": properties}


def paged_client(pages):
    """Fake GeoapifyClient: the n-th call returns pages[n], then empty pages."""
    client = MagicMock()
    client.fetch_places.side_effect = list(pages) + [[]] * 50
    return client


class TestMapPlace:
    def test_primary_fields(self):
        f = feature(
            "p1",
            name="Everest Cafe",
            categories=["catering.cafe", "catering"],
            formatted="Thamel, Kathmandu",
            street="Thamel Marg",
            city="Kathmandu",
            contact={"phone": "+977-1", "email": "hi@everest.np", "website": "https://everest.np"},
            opening_hours="Mo-Su 08:00-20:00",
            facilities={"wheelchair": True},
            datasource={"sourcename": "openstreetmap"},
        )

        values = map_place(f, "catering.restaurant")

        assert values["name"] == "Everest Cafe"
        assert values["category"] == "catering.cafe; catering"
        assert values["address"] == "Thamel, Kathmandu"
        assert values["street"] == "Thamel Marg"
        assert values["phone"] == "+977-1"
        assert values["website"] == "https://everest.np"
        assert values["status"] == "PENDING"
        assert values["datasource"] == "openstreetmap"
        assert json.loads(values["facilities"]) == {"wheelchair": True}
        assert json.loads(values["opening_hours"]) == "Mo-Su 08:00-20:00"

    def test_fallbacks(self):
        f = {
            "properties": {
                "place_id": "p2",
                "address_line1": "Lakeside Road",
                "datasource": {"raw": {"phone": "+977-61", "website": "http://lake.example"}},
            },
            "geometry": {"type": "Point", "coordinates": [83.95, 28.21]},
        }

        values = map_place(f, "accommodation.hotel")

        assert values["name"] == "Lakeside Road"
        assert values["address"] == "Lakeside Road"
        assert values["street"] == "Lakeside Road"
        assert values["category"] == "accommodation.hotel"
        assert values["phone"] == "+977-61"
        assert values["website"] == "http://lake.example"
        assert values["email"] is None
        assert (values["latitude"], values["longitude"]) == (28.21, 83.95)
        assert values["opening_hours"] is None

    def test_unknown_name_and_address(self):
        values = map_place({"properties": {"place_id": "p3"}}, "sport.fitness")

        assert values["name"] == "Unknown"
        assert values["address"] == "Unknown"


class TestLocations:
    def test_single_location_is_kathmandu(self):
        assert [loc["name"] for loc in get_locations(False)] == ["Kathmandu"]
        assert len(get_locations(True)) == len(NEPAL_LOCATIONS) == 10

    def test_category_override(self):
        assert get_categories("sport.fitness") == ["sport.fitness"]
        assert get_categories(None) == CATEGORIES


class TestStorePlaces:
    def test_new_and_existing(self, db):
        store_places(db, [feature("a")], "catering.restaurant")

        new, existing, total = store_places(db, [feature("a"), feature("b")], "catering.restaurant")

        assert (new, existing, total) == (1, 1, 2)
        assert db.query(Client).count() == 2

    def test_duplicates_inside_one_batch(self, db):
        new, existing, total = store_places(db, [feature("a"), feature("a")], "catering.restaurant")

        assert (new, existing, total) == (1, 1, 2)
        assert db.query(Client).count() == 1

    def test_features_without_place_id_skipped(self, db):
        new, existing, total = store_places(
            db, [{"properties": {"name": "Nameless"}}, feature("a")], "catering.restaurant"
        )

        assert (new, existing, total) == (1, 0, 1)

    def test_malformed_features_skipped(self, db):
        broken = {"properties": {"place_id": "bad", "contact": "n/a"}}

        new, existing, total = store_places(db, [broken, None, feature("good")], "catering.restaurant")

        assert (new, existing, total) == (1, 0, 1)
        assert [c.place_id for c in db.query(Client).all()] == ["good"]


class TestRunAutoFetch:
    def _run(self, db, client, **kwargs):
        defaults = dict(
            category="catering.restaurant",
            use_multiple_locations=False,
            client=client,
            delay=0,
        )
        defaults.update(kwargs)
        return run_auto_fetch(db, **defaults)

    def test_stops_on_short_page(self, db):
        client = paged_client([[feature("a"), feature("b")], [feature("c")]])

        result = self._run(db, client, batch_size=2)

        assert result["success"] is True
        assert result["summary"] == {
            "total_fetched": 3,
            "new_clients": 3,
            "existing_clients": 0,
            "categories_processed": 1,
        }
        assert client.fetch_places.call_count == 2
        # second page requested at offset == batch_size
        assert client.fetch_places.call_args_list[1].args[-1] == 2

    def test_rerun_never_duplicates(self, db):
        pages = [[feature("a"), feature("b")], [feature("c")]]
        self._run(db, paged_client(pages), batch_size=2)

        result = self._run(db, paged_client(pages), batch_size=2)

        assert result["summary"]["new_clients"] == 0
        assert result["summary"]["existing_clients"] == 3
        assert db.query(Client).count() == 3

    def test_stops_at_batch_cap(self, db):
        client = MagicMock()
        client.fetch_places.side_effect = lambda cat, lat, lon, radius, limit, offset: [
            feature(f"{offset}-{i}") for i in range(limit)
        ]

        result = self._run(db, client, batch_size=3, max_batches_per_category=4)

        assert client.fetch_places.call_count == 4
        assert result["summary"]["new_clients"] == 12

    def test_batch_error_is_logged_and_run_continues(self, db):
        client = MagicMock()
        client.fetch_places.side_effect = UpstreamError("Geoapify API error: 500")

        result = self._run(db, client, category=None)

        assert result["success"] is True
        assert len(result["stats"]) == len(CATEGORIES)
        assert all(s["completed"] for s in result["stats"])
        assert result["summary"]["total_fetched"] == 0

    def test_malformed_page_does_not_abort_run(self, db):
        client = MagicMock()
        client.fetch_places.return_value = [
            {"properties": {"place_id": "bad", "contact": "n/a"}},
            feature("good"),
        ]

        result = self._run(db, client, category=None, batch_size=5)

        assert result["success"] is True
        assert len(result["stats"]) == len(CATEGORIES)
        assert result["summary"]["new_clients"] == 1
        assert db.get(AutomationJob, result["job_id"]).status == "completed"

    def test_unexpected_batch_error_ends_only_that_location(self, db):
        client = MagicMock()
        client.fetch_places.side_effect = [KeyError("features")] + [[feature("a")]] * 20

        result = self._run(db, client, category="sport.fitness", use_multiple_locations=True, batch_size=5)

        assert result["success"] is True
        assert result["summary"]["new_clients"] == 1
        assert client.fetch_places.call_count == len(NEPAL_LOCATIONS)

    def test_every_location_is_visited(self, db):
        client = paged_client([])

        self._run(db, client, use_multiple_locations=True)

        assert client.fetch_places.call_count == len(NEPAL_LOCATIONS)

    def test_records_automation_job(self, db):
        result = self._run(db, paged_client([[feature("a")]]), batch_size=5)

        job = db.get(AutomationJob, result["job_id"])
        assert job.job_type == "places_auto_fetch"
        assert job.status == "completed"
        assert job.result_summary["new_clients"] == 1
        assert job.finished_at is not None

    def test_missing_api_key_fails_fast(self, db):
        client = GeoapifyClient()
        client.api_key = None

        with pytest.raises(ConfigurationError):
            self._run(db, client)

        assert db.query(AutomationJob).count() == 0


class TestGeoapifyClient:
    def _client(self):
        client = GeoapifyClient()
        client.api_key = "test-key"
        return client

    @patch("clients_finder.workers.places.geoapify_client.requests.get")
    def test_fetch_places_request(self, mock_get):
        mock_get.return_value = MagicMock(ok=True, json=lambda: {"features": [feature("a")]})

        features = self._client().fetch_places("education.school", 27.7172, 85.324, "25000", 100, 200)

        assert len(features) == 1
        params = mock_get.call_args.kwargs["params"]
        assert params["categories"] == "education.school"
        assert params["filter"] == "circle:85.324,27.7172,25000"
        assert params["limit"] == 100
        assert params["offset"] == 200
        assert params["apiKey"] == "test-key"

    @patch("clients_finder.workers.places.geoapify_client.requests.get")
    def test_non_2xx_raises_upstream_error(self, mock_get):
        mock_get.return_value = MagicMock(ok=False, status_code=401)

        with pytest.raises(UpstreamError) as exc:
            self._client().fetch_places("education.school", 27.7, 85.3, "1000", 10, 0)

        assert "401" in exc.value.message

    @patch("clients_finder.workers.places.geoapify_client.requests.get")
    def test_non_object_payload_raises_upstream_error(self, mock_get):
        mock_get.return_value = MagicMock(ok=True, json=lambda: ["not", "an", "object"])

        with pytest.raises(UpstreamError):
            self._client().fetch_places("education.school", 27.7, 85.3, "1000", 10, 0)

    @patch("time.sleep")
    @patch("clients_finder.workers.places.geoapify_client.requests.get")
    def test_transient_errors_are_retried(self, mock_get, _sleep):
        mock_get.side_effect = [
            requests.exceptions.ConnectionError("reset"),
            requests.exceptions.Timeout("slow"),
            MagicMock(ok=True, json=lambda: {"features": []}),
        ]

        assert self._client().fetch_places("education.school", 27.7, 85.3, "1000", 10, 0) == []
        assert mock_get.call_count == 3

    @patch("clients_finder.workers.places.geoapify_client.requests.get")
    def test_geocode(self, mock_get):
        mock_get.return_value = MagicMock(
            ok=True,
            json=lambda: {"features": [{"properties": {"lat": 28.2, "lon": 83.98, "formatted": "Pokhara, Nepal"}}]},
        )

        assert self._client().geocode("Pokhara") == {"lat": 28.2, "lon": 83.98, "formatted": "Pokhara, Nepal"}

    @patch("clients_finder.workers.places.geoapify_client.requests.get")
    def test_geocode_no_match(self, mock_get):
        mock_get.return_value = MagicMock(ok=True, json=lambda: {"features": []})

        with pytest.raises(NotFoundError):
            self._client().geocode("Atlantis")
