import logging
import secrets
import string
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from reviewdisplay.models.widget import Widget
from reviewdisplay.schemas.widget import WidgetCreate, WidgetUpdate

logger = logging.getLogger(__name__)

WIDGET_ID_ALPHABET = string.digits + string.ascii_lowercase
WIDGET_ID_LENGTH = 8

WIDGET_DEFAULTS: Dict[str, Any] = {
    "name": None,
    "theme": "light",
    "layout": "carousel",
    "max_reviews": 5,
    "min_rating": 4,
    "visible_cards": 2,
    "custom_css": None,
}

TOGGLE_FIELDS = ("show_avatar", "show_date", "show_rating")


def generate_widget_id() -> str:
    """Return a short random base36 token.

    Not collision resistant: eight characters give roughly 2.8e12 values and
    nothing checks for an existing row with the same id.
    """

    return "".join(secrets.choice(WIDGET_ID_ALPHABET) for _ in range(WIDGET_ID_LENGTH))


def list_widgets(db: Session) -> List[Widget]:
    return db.query(Widget).order_by(Widget.created_at.desc()).all()


def get_widget(db: Session, widget_id: str) -> Optional[Widget]:
    return db.get(Widget, widget_id)


def create_widget(db: Session, payload: WidgetCreate) -> Widget:
    data = payload.model_dump()
    values: Dict[str, Any] = {}
    for field, default in WIDGET_DEFAULTS.items():
        # Falsy values (0, "", None) fall back to the default.
        values[field] = data.get(field) or default
    for field in TOGGLE_FIELDS:
        values[field] = data.get(field) is not False

    now = datetime.utcnow()
    widget = Widget(
        id=generate_widget_id(),
        place_id=payload.place_id.strip(),
        created_at=now,
        updated_at=now,
        **values,
    )
    db.add(widget)
    db.commit()
    db.refresh(widget)
    logger.info("Created widget %s for place %s", widget.id, widget.place_id)
    return widget


def update_widget(db: Session, widget: Widget, payload: WidgetUpdate) -> Widget:
    """Merge the provided fields into ``widget``.

    Fields that are absent or null keep their stored value. For the display
    toggles an explicit ``false`` is a change, not an absence.
    """

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None:
            continue
        if field == "place_id":
            value = value.strip()
        elif field in ("name", "custom_css") and not value:
            value = None
        setattr(widget, field, value)
    widget.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(widget)
    logger.info("Updated widget %s (%s)", widget.id, ", ".join(sorted(changes)) or "no fields")
    return widget


def delete_widget(db: Session, widget: Widget) -> None:
    # Cached reviews are keyed by place id and may be shared with other widgets.
    db.delete(widget)
    db.commit()
    logger.info("Deleted widget %s", widget.id)
