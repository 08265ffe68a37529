from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from reviewdisplay.db.session import SessionLocal
from reviewdisplay.models.widget import Widget
from reviewdisplay.services.google_places import PlacesClient, get_places_client
from reviewdisplay.services.widgets import get_widget


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_client() -> PlacesClient:
    return get_places_client()


def _widget_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Widget not found")


def get_widget_or_404(widget_id: str, db: Session = Depends(get_db)) -> Widget:
    widget = get_widget(db, widget_id)
    if widget is None:
        raise _widget_not_found()
    return widget
