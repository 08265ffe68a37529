from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from reviewdisplay.schemas.review import PlaceSummary, ReviewOut
from reviewdisplay.schemas.widget import LayoutType, ThemeType


class EmbedWidgetConfig(BaseModel):
    id: str
    theme: ThemeType
    layout: LayoutType
    visible_cards: int
    show_avatar: bool
    show_date: bool
    show_rating: bool
    custom_css: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EmbedData(BaseModel):
    widget: EmbedWidgetConfig
    place: PlaceSummary
    reviews: List[ReviewOut]
    warning: Optional[str] = None
