from typing import Any, Dict, List, Sequence, TypeVar

T = TypeVar("T")

# Shown in the dashboard preview until a place id yields real reviews.
MOCK_REVIEWS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "author_name": "John Smith",
        "author_photo": None,
        "rating": 5,
        "text": (
            "Excellent service! The team was professional and delivered exactly "
            "what we needed. Highly recommended."
        ),
        "relative_time": "2 weeks ago",
    },
    {
        "id": "2",
        "author_name": "Sarah Johnson",
        "author_photo": None,
        "rating": 5,
        "text": (
            "Great experience from start to finish. Very responsive and the quality "
            "exceeded our expectations."
        ),
        "relative_time": "1 month ago",
    },
    {
        "id": "3",
        "author_name": "Mike Williams",
        "author_photo": None,
        "rating": 4,
        "text": (
            "Good work overall. Communication could be slightly better but the end "
            "result was solid."
        ),
        "relative_time": "2 months ago",
    },
]


def _rating_of(review: Any) -> int:
    if isinstance(review, dict):
        return review.get("rating") or 0
    return review.rating or 0


def select_reviews(reviews: Sequence[T], min_rating: int, max_reviews: int) -> List[T]:
    """Keep reviews rated at least ``min_rating``, then cap at ``max_reviews``."""

    eligible = [review for review in reviews if _rating_of(review) >= min_rating]
    return eligible[: max(max_reviews, 0)]
