import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from reviewdisplay.api.dependencies import get_client, get_db
from reviewdisplay.schemas.review import PlaceInfoOut
from reviewdisplay.services.google_places import PlacesClient, ReviewFetchError
from reviewdisplay.services.reviews import (
    fetch_place_reviews,
    fetch_place_reviews_or_cached,
)

router = APIRouter(prefix="/api/reviews", tags=["reviews"])

logger = logging.getLogger(__name__)


@router.get("/{place_id}", response_model=PlaceInfoOut)
def get_reviews(
    place_id: str,
    db: Session = Depends(get_db),
    client: PlacesClient = Depends(get_client),
):
    try:
        place_info = fetch_place_reviews_or_cached(db, place_id, client)
    except ReviewFetchError as exc:
        logger.warning("Reviews unavailable for place %s: %s", place_id, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return PlaceInfoOut.model_validate(place_info)


@router.post("/{place_id}/refresh", response_model=PlaceInfoOut)
def refresh_reviews(
    place_id: str,
    db: Session = Depends(get_db),
    client: PlacesClient = Depends(get_client),
):
    try:
        place_info = fetch_place_reviews(db, place_id, client, force=True)
    except ReviewFetchError as exc:
        logger.warning("Refresh failed for place %s: %s", place_id, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return PlaceInfoOut.model_validate(place_info)
