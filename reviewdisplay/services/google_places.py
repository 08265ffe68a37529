import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import requests

from reviewdisplay.core.config import settings

logger = logging.getLogger(__name__)

PLACE_DETAIL_FIELDS = "name,rating,user_ratings_total,reviews"


class ReviewFetchError(RuntimeError):
    """Raised when reviews for a place cannot be obtained from the API."""


class PlacesConfigurationError(ReviewFetchError):
    """Raised when the Places API key is not configured."""


class PlacesAPIError(ReviewFetchError):
    """Raised when the Places API call fails or reports a non-OK status."""


class PlacesClient:
    """Minimal client for the Google Places Details endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = settings.GOOGLE_PLACES_API_URL,
        timeout: float = settings.PLACES_REQUEST_TIMEOUT,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._session = requests.Session()

    def get_place_details(self, place_id: str) -> Dict[str, Any]:
        """Return the ``result`` object of a Place Details response."""

        if not self.api_key:
            raise PlacesConfigurationError("Google Places API key not configured")

        params = {
            "place_id": place_id,
            "fields": PLACE_DETAIL_FIELDS,
            "reviews_no_translations": "true",
            "key": self.api_key,
        }
        logger.info("Requesting place details for %s", place_id)
        try:
            response = self._session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            logger.warning("Places request for %s failed: %s", place_id, exc)
            raise PlacesAPIError(f"Google API request failed: {exc}") from exc
        except ValueError as exc:
            raise PlacesAPIError("Google API returned an invalid response") from exc

        status = data.get("status")
        if status != "OK":
            message = data.get("error_message") or f"Google API error: {status}"
            logger.warning("Places API answered %s for %s: %s", status, place_id, message)
            raise PlacesAPIError(message)

        result = data.get("result")
        if not result:
            raise PlacesAPIError("No place found")
        return result


@lru_cache(maxsize=1)
def get_places_client() -> PlacesClient:
    return PlacesClient(api_key=settings.GOOGLE_PLACES_API_KEY)
