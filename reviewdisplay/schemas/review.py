from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

ReviewSource = Literal["live", "cached"]


class ReviewOut(BaseModel):
    id: str
    place_id: str
    author_name: Optional[str] = None
    author_photo: Optional[str] = None
    rating: int
    text: str = ""
    time: int
    relative_time: Optional[str] = None
    fetched_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PlaceSummary(BaseModel):
    name: str
    rating: float
    total_reviews: int


class PlaceInfoOut(PlaceSummary):
    reviews: List[ReviewOut]
    source: ReviewSource
    warning: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
