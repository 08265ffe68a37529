from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from reviewdisplay.db.base import Base


class Widget(Base):
    __tablename__ = "widgets"

    id = Column(String, primary_key=True, index=True)
    place_id = Column(String, nullable=False)
    name = Column(String)
    theme = Column(String, nullable=False, default="light")
    layout = Column(String, nullable=False, default="carousel")
    max_reviews = Column(Integer, nullable=False, default=5)
    min_rating = Column(Integer, nullable=False, default=4)
    visible_cards = Column(Integer, nullable=False, default=2)
    show_avatar = Column(Boolean, nullable=False, default=True)
    show_date = Column(Boolean, nullable=False, default=True)
    show_rating = Column(Boolean, nullable=False, default=True)
    custom_css = Column(Text)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
