import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from reviewdisplay.api.dependencies import get_client, get_db, get_widget_or_404
from reviewdisplay.core.config import settings
from reviewdisplay.models.widget import Widget
from reviewdisplay.schemas.embed import EmbedData
from reviewdisplay.services.embed import (
    WIDGET_NOT_FOUND_SCRIPT,
    build_base_url,
    build_embed_data,
    generate_widget_script,
)
from reviewdisplay.services.google_places import PlacesClient, ReviewFetchError
from reviewdisplay.services.reviews import fetch_place_reviews_or_cached
from reviewdisplay.services.widgets import get_widget

router = APIRouter(prefix="/embed", tags=["embed"])

logger = logging.getLogger(__name__)

JAVASCRIPT_MEDIA_TYPE = "application/javascript"


@router.get("/data/{widget_id}", response_model=EmbedData)
def embed_data(
    widget: Widget = Depends(get_widget_or_404),
    db: Session = Depends(get_db),
    client: PlacesClient = Depends(get_client),
):
    try:
        place_info = fetch_place_reviews_or_cached(db, widget.place_id, client)
    except ReviewFetchError as exc:
        logger.warning("Embed data unavailable for widget %s: %s", widget.id, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return build_embed_data(widget, place_info)


@router.get("/{widget_id}.js")
def embed_script(widget_id: str, request: Request, db: Session = Depends(get_db)):
    if get_widget(db, widget_id) is None:
        return Response(
            content=WIDGET_NOT_FOUND_SCRIPT,
            status_code=404,
            media_type=JAVASCRIPT_MEDIA_TYPE,
        )

    base_url = build_base_url(
        request.headers.get("host"),
        request.headers.get("x-forwarded-proto"),
    )
    return Response(
        content=generate_widget_script(widget_id, base_url),
        media_type=JAVASCRIPT_MEDIA_TYPE,
        headers={"Cache-Control": f"public, max-age={settings.EMBED_CACHE_MAX_AGE}"},
    )
