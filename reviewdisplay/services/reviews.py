"""Review fetching with a per-place freshness window.

Reviews are cached in the ``reviews`` table. A place whose newest cached row
is younger than ``REVIEW_CACHE_HOURS`` is served from the table; otherwise the
Places API is queried, the answer is merged into the table and rows older than
``REVIEW_RETENTION_DAYS`` are pruned for that place.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from reviewdisplay.core.config import settings
from reviewdisplay.models.review import Review
from reviewdisplay.services.google_places import PlacesClient, ReviewFetchError

logger = logging.getLogger(__name__)

CACHED_PLACE_NAME = "Cached"
UNAVAILABLE_PLACE_NAME = "Cached (API unavailable)"

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass(slots=True)
class PlaceInfo:
    name: str
    rating: float
    total_reviews: int
    reviews: List[Review]
    source: str
    warning: Optional[str] = None


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def string_hash36(value: str) -> str:
    """31-multiplier rolling hash wrapped to a signed 32-bit int, as base36."""

    result = 0
    for char in value:
        result = (result * 31 + ord(char)) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return _to_base36(abs(result))


def review_id(place_id: str, author_name: str, time: int) -> str:
    return string_hash36(f"{place_id}-{author_name}-{time}")


def average_rating(reviews: Sequence[Review]) -> float:
    if not reviews:
        return 0
    return round(sum(review.rating for review in reviews) / len(reviews), 1)


def get_cached_reviews(db: Session, place_id: str) -> List[Review]:
    return (
        db.query(Review)
        .filter(Review.place_id == place_id)
        .order_by(Review.time.desc())
        .all()
    )


def last_fetch_time(db: Session, place_id: str) -> Optional[datetime]:
    return (
        db.query(func.max(Review.fetched_at))
        .filter(Review.place_id == place_id)
        .scalar()
    )


def is_fresh(fetched_at: Optional[datetime], now: datetime) -> bool:
    if fetched_at is None:
        return False
    return fetched_at > now - timedelta(hours=settings.REVIEW_CACHE_HOURS)


def _normalize_review(place_id: str, raw: Dict[str, Any], fetched_at: datetime) -> Review:
    author_name = raw.get("author_name") or ""
    time = int(raw.get("time") or 0)
    return Review(
        id=review_id(place_id, author_name, time),
        place_id=place_id,
        author_name=author_name,
        author_photo=raw.get("profile_photo_url") or None,
        rating=int(raw.get("rating") or 0),
        text=raw.get("text") or "",
        time=time,
        relative_time=raw.get("relative_time_description") or "",
        fetched_at=fetched_at,
    )


def _store_reviews(
    db: Session,
    place_id: str,
    reviews: Iterable[Review],
    now: datetime,
    replace_all: bool = False,
) -> List[Review]:
    stored = [db.merge(review) for review in reviews]
    # Flush before the bulk delete so replaced rows already carry the new fetched_at.
    db.flush()

    cutoff = now - timedelta(days=settings.REVIEW_RETENTION_DAYS)
    pruned = (
        db.query(Review)
        .filter(Review.place_id == place_id, Review.fetched_at < cutoff)
        .delete(synchronize_session=False)
    )
    if replace_all:
        fresh_ids = [review.id for review in stored]
        stale = db.query(Review).filter(Review.place_id == place_id)
        if fresh_ids:
            stale = stale.filter(Review.id.notin_(fresh_ids))
        pruned += stale.delete(synchronize_session=False)

    db.commit()
    if pruned:
        logger.info("Pruned %s stale reviews for place %s", pruned, place_id)
    return stored


def fetch_place_reviews(
    db: Session,
    place_id: str,
    client: PlacesClient,
    *,
    force: bool = False,
    now: Optional[datetime] = None,
) -> PlaceInfo:
    """Return place info and reviews, preferring a fresh cache.

    ``force`` skips the freshness check and replaces the place's cached rows
    with the API answer. Raises ``ReviewFetchError`` when the API cannot be
    used.
    """

    now = now or datetime.utcnow()

    if not force and is_fresh(last_fetch_time(db, place_id), now):
        cached = get_cached_reviews(db, place_id)
        if cached:
            logger.info("Serving %s cached reviews for place %s", len(cached), place_id)
            return PlaceInfo(
                name=CACHED_PLACE_NAME,
                rating=average_rating(cached),
                total_reviews=len(cached),
                reviews=cached,
                source="cached",
            )

    result = client.get_place_details(place_id)
    fresh = [
        _normalize_review(place_id, raw, now) for raw in result.get("reviews") or []
    ]
    stored = _store_reviews(db, place_id, fresh, now, replace_all=force)
    logger.info("Fetched %s reviews from Google for place %s", len(stored), place_id)

    return PlaceInfo(
        name=result.get("name") or "",
        rating=result.get("rating") or 0,
        total_reviews=result.get("user_ratings_total") or 0,
        reviews=stored,
        source="live",
    )


def fetch_place_reviews_or_cached(
    db: Session,
    place_id: str,
    client: PlacesClient,
    *,
    now: Optional[datetime] = None,
) -> PlaceInfo:
    """Like ``fetch_place_reviews`` but degrade to any cached rows on failure."""

    try:
        return fetch_place_reviews(db, place_id, client, now=now)
    except ReviewFetchError as exc:
        cached = get_cached_reviews(db, place_id)
        if not cached:
            raise
        logger.warning(
            "Falling back to %s cached reviews for place %s: %s", len(cached), place_id, exc
        )
        return PlaceInfo(
            name=UNAVAILABLE_PLACE_NAME,
            rating=average_rating(cached),
            total_reviews=len(cached),
            reviews=cached,
            source="cached",
            warning=str(exc),
        )
