from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ThemeType = Literal["light", "dark"]

LayoutType = Literal["badge", "carousel", "grid", "list"]


class WidgetFields(BaseModel):
    """Every widget field is optional on the wire; defaults are applied on create."""

    place_id: Optional[str] = None
    name: Optional[str] = None
    theme: Optional[ThemeType] = None
    layout: Optional[LayoutType] = None
    max_reviews: Optional[int] = Field(default=None, ge=0, le=50)
    min_rating: Optional[int] = Field(default=None, ge=0, le=5)
    visible_cards: Optional[int] = Field(default=None, ge=0, le=4)
    show_avatar: Optional[bool] = None
    show_date: Optional[bool] = None
    show_rating: Optional[bool] = None
    custom_css: Optional[str] = None


class WidgetCreate(WidgetFields):
    pass


class WidgetUpdate(WidgetFields):
    # Zero means "use the default" only on create; an update must stay in range.
    max_reviews: Optional[int] = Field(default=None, ge=1, le=50)
    min_rating: Optional[int] = Field(default=None, ge=1, le=5)
    visible_cards: Optional[int] = Field(default=None, ge=1, le=4)


class WidgetOut(BaseModel):
    id: str
    place_id: str
    name: Optional[str] = None
    theme: ThemeType
    layout: LayoutType
    max_reviews: int
    min_rating: int
    visible_cards: int
    show_avatar: bool
    show_date: bool
    show_rating: bool
    custom_css: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
