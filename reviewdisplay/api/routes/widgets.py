from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from reviewdisplay.api.dependencies import get_db, get_widget_or_404
from reviewdisplay.models.widget import Widget
from reviewdisplay.schemas.widget import WidgetCreate, WidgetOut, WidgetUpdate
from reviewdisplay.services import widgets as widget_service

router = APIRouter(prefix="/api/widgets", tags=["widgets"])


def _require_place_id(place_id) -> None:
    if place_id is None or not place_id.strip():
        raise HTTPException(status_code=400, detail="place_id is required")


@router.get("", response_model=List[WidgetOut])
def list_widgets(db: Session = Depends(get_db)):
    return widget_service.list_widgets(db)


@router.get("/{widget_id}", response_model=WidgetOut)
def get_widget(widget: Widget = Depends(get_widget_or_404)):
    return widget


@router.post("", response_model=WidgetOut, status_code=status.HTTP_201_CREATED)
def create_widget(payload: WidgetCreate, db: Session = Depends(get_db)):
    _require_place_id(payload.place_id)
    return widget_service.create_widget(db, payload)


@router.put("/{widget_id}", response_model=WidgetOut)
def update_widget(
    payload: WidgetUpdate,
    widget: Widget = Depends(get_widget_or_404),
    db: Session = Depends(get_db),
):
    if payload.place_id is not None:
        _require_place_id(payload.place_id)
    return widget_service.update_widget(db, widget, payload)


@router.delete("/{widget_id}")
def delete_widget(
    widget: Widget = Depends(get_widget_or_404),
    db: Session = Depends(get_db),
):
    widget_service.delete_widget(db, widget)
    return {"success": True}
