from datetime import datetime, timedelta

import pytest

from reviewdisplay.models.review import Review
from reviewdisplay.services.google_places import (
    PlacesAPIError,
    PlacesClient,
    PlacesConfigurationError,
)
from reviewdisplay.services.reviews import (
    CACHED_PLACE_NAME,
    average_rating,
    fetch_place_reviews,
    fetch_place_reviews_or_cached,
    review_id,
    string_hash36,
)
from tests.fakes import FakePlacesClient, make_api_review

PLACE_ID = "ChIJ123"


def seed_review(db, place_id, author, rating, fetched_at, time=1600000000):
    review = Review(
        id=review_id(place_id, author, time),
        place_id=place_id,
        author_name=author,
        rating=rating,
        text="Seeded",
        time=time,
        relative_time="a year ago",
        fetched_at=fetched_at,
    )
    db.add(review)
    db.commit()
    return review


def test_string_hash_matches_32_bit_rolling_hash():
    assert string_hash36("") == "0"
    assert string_hash36("a") == "2p"
    # Wraps to the most negative 32-bit value.
    assert string_hash36("polygenelubricants") == "zik0zk"


def test_review_id_is_stable_and_distinct():
    first = review_id(PLACE_ID, "Alice", 1700000300)
    assert first == review_id(PLACE_ID, "Alice", 1700000300)
    assert first != review_id(PLACE_ID, "Alice", 1700000301)
    assert first != review_id("ChIJ999", "Alice", 1700000300)


def test_average_rating_rounds_to_one_decimal():
    reviews = [Review(rating=5), Review(rating=4), Review(rating=4)]
    assert average_rating(reviews) == 4.3
    assert average_rating([]) == 0


def test_live_fetch_then_cache_within_ttl(db_session):
    places = FakePlacesClient()
    now = datetime(2024, 5, 1, 12, 0, 0)

    live = fetch_place_reviews(db_session, PLACE_ID, places, now=now)
    assert live.source == "live"
    assert live.name == "Corner Bakery"
    assert live.rating == 4.6
    assert live.total_reviews == 128
    live_ids = sorted(review.id for review in live.reviews)
    assert len(live_ids) == 3

    cached = fetch_place_reviews(db_session, PLACE_ID, places, now=now + timedelta(hours=23))
    assert cached.source == "cached"
    assert cached.name == CACHED_PLACE_NAME
    assert cached.rating == 4.0
    assert cached.total_reviews == 3
    assert sorted(review.id for review in cached.reviews) == live_ids
    assert places.calls == [PLACE_ID]


def test_cached_reviews_are_newest_first(db_session):
    places = FakePlacesClient()
    now = datetime(2024, 5, 1, 12, 0, 0)
    fetch_place_reviews(db_session, PLACE_ID, places, now=now)

    cached = fetch_place_reviews(db_session, PLACE_ID, places, now=now + timedelta(hours=1))
    times = [review.time for review in cached.reviews]
    assert times == sorted(times, reverse=True)


def test_refetch_after_ttl(db_session):
    places = FakePlacesClient()
    now = datetime(2024, 5, 1, 12, 0, 0)
    fetch_place_reviews(db_session, PLACE_ID, places, now=now)

    result = fetch_place_reviews(db_session, PLACE_ID, places, now=now + timedelta(hours=25))
    assert result.source == "live"
    assert places.calls == [PLACE_ID, PLACE_ID]


def test_fetch_prunes_reviews_older_than_retention(db_session):
    now = datetime(2024, 5, 10, 12, 0, 0)
    seed_review(db_session, PLACE_ID, "Old Timer", 5, now - timedelta(days=8))
    seed_review(db_session, PLACE_ID, "Recent", 5, now - timedelta(days=3), time=1600000001)
    seed_review(db_session, "ChIJother", "Elsewhere", 5, now - timedelta(days=30))

    fetch_place_reviews(db_session, PLACE_ID, FakePlacesClient(), now=now)

    authors = {
        review.author_name
        for review in db_session.query(Review).filter(Review.place_id == PLACE_ID)
    }
    assert "Old Timer" not in authors
    assert "Recent" in authors
    assert {"Alice", "Bob", "Carol"} <= authors
    # Pruning is scoped to the fetched place.
    assert db_session.query(Review).filter(Review.place_id == "ChIJother").count() == 1


def test_upsert_replaces_existing_review(db_session):
    now = datetime(2024, 5, 1, 12, 0, 0)
    places = FakePlacesClient()
    fetch_place_reviews(db_session, PLACE_ID, places, now=now)

    places.result["reviews"][0]["text"] = "Edited after a second visit"
    fetch_place_reviews(db_session, PLACE_ID, places, now=now + timedelta(days=2))

    rows = db_session.query(Review).filter(Review.place_id == PLACE_ID).all()
    assert len(rows) == 3
    alice = next(row for row in rows if row.author_name == "Alice")
    assert alice.text == "Edited after a second visit"
    assert alice.fetched_at == now + timedelta(days=2)


def test_empty_review_list_is_valid(db_session):
    places = FakePlacesClient()
    places.result["reviews"] = []

    result = fetch_place_reviews(db_session, PLACE_ID, places, now=datetime(2024, 5, 1))
    assert result.source == "live"
    assert result.reviews == []
    assert result.name == "Corner Bakery"


def test_missing_place_fields_default_to_zero(db_session):
    places = FakePlacesClient()
    places.result = {"name": "Quiet Spot"}

    result = fetch_place_reviews(db_session, PLACE_ID, places, now=datetime(2024, 5, 1))
    assert result.rating == 0
    assert result.total_reviews == 0
    assert result.reviews == []


def test_failure_without_cache_raises(db_session):
    places = FakePlacesClient()
    places.error = PlacesAPIError("Google API error: REQUEST_DENIED")

    with pytest.raises(PlacesAPIError):
        fetch_place_reviews_or_cached(db_session, PLACE_ID, places)


def test_failure_with_cache_degrades(db_session):
    now = datetime.utcnow()
    seed_review(db_session, PLACE_ID, "Dana", 5, now - timedelta(days=2))
    seed_review(db_session, PLACE_ID, "Eli", 4, now - timedelta(days=2), time=1600000001)
    places = FakePlacesClient()
    places.error = PlacesAPIError("Google API error: OVER_QUERY_LIMIT")

    result = fetch_place_reviews_or_cached(db_session, PLACE_ID, places, now=now)
    assert result.source == "cached"
    assert result.warning == "Google API error: OVER_QUERY_LIMIT"
    assert result.rating == 4.5
    assert len(result.reviews) == 2


def test_client_without_api_key_is_configuration_error():
    client = PlacesClient(api_key=None)
    with pytest.raises(PlacesConfigurationError):
        client.get_place_details(PLACE_ID)


def test_client_reports_non_ok_status(monkeypatch):
    class StubResponse:
        def raise_for_status(self):
            return None

        def json(self):
            return {"status": "INVALID_REQUEST", "error_message": "Invalid place id"}

    client = PlacesClient(api_key="key")
    captured = {}

    def fake_get(url, params, timeout):
        captured.update(params)
        return StubResponse()

    monkeypatch.setattr(client._session, "get", fake_get)
    with pytest.raises(PlacesAPIError, match="Invalid place id"):
        client.get_place_details(PLACE_ID)
    assert captured["place_id"] == PLACE_ID
    assert captured["fields"] == "name,rating,user_ratings_total,reviews"
    assert captured["key"] == "key"


def test_get_reviews_endpoint(client, places):
    response = client.get(f"/api/reviews/{PLACE_ID}")
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Corner Bakery"
    assert body["total_reviews"] == 128
    assert body["source"] == "live"
    assert body["warning"] is None
    assert [r["author_name"] for r in body["reviews"]] == ["Alice", "Bob", "Carol"]

    again = client.get(f"/api/reviews/{PLACE_ID}")
    assert again.json()["source"] == "cached"
    assert len(places.calls) == 1


def test_get_reviews_endpoint_degrades_with_warning(client, places, db_session):
    seed_review(db_session, PLACE_ID, "Dana", 5, datetime.utcnow() - timedelta(days=2))
    places.error = PlacesAPIError("Google API error: UNKNOWN_ERROR")

    response = client.get(f"/api/reviews/{PLACE_ID}")
    assert response.status_code == 200
    body = response.json()
    assert body["warning"] == "Google API error: UNKNOWN_ERROR"
    assert body["name"] == "Cached (API unavailable)"
    assert len(body["reviews"]) == 1


def test_get_reviews_endpoint_fails_without_cache(client, places):
    places.error = PlacesConfigurationError("Google Places API key not configured")

    response = client.get(f"/api/reviews/{PLACE_ID}")
    assert response.status_code == 500
    assert response.json()["detail"] == "Google Places API key not configured"


def test_refresh_bypasses_cache_and_drops_missing_reviews(client, places):
    client.get(f"/api/reviews/{PLACE_ID}")
    places.result["reviews"] = [make_api_review("Zed", 5, 1700000900)]

    response = client.post(f"/api/reviews/{PLACE_ID}/refresh")
    assert response.status_code == 200
    assert [r["author_name"] for r in response.json()["reviews"]] == ["Zed"]
    assert len(places.calls) == 2

    cached = client.get(f"/api/reviews/{PLACE_ID}").json()
    assert cached["source"] == "cached"
    assert [r["author_name"] for r in cached["reviews"]] == ["Zed"]


def test_failed_refresh_keeps_cache(client, places):
    client.get(f"/api/reviews/{PLACE_ID}")
    places.error = PlacesAPIError("Google API request failed: timeout")

    response = client.post(f"/api/reviews/{PLACE_ID}/refresh")
    assert response.status_code == 500

    cached = client.get(f"/api/reviews/{PLACE_ID}").json()
    assert cached["source"] == "cached"
    assert len(cached["reviews"]) == 3
