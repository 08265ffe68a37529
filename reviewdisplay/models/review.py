from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from reviewdisplay.db.base import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String, primary_key=True)
    place_id = Column(String, nullable=False, index=True)
    author_name = Column(String)
    author_photo = Column(String)
    rating = Column(Integer)
    text = Column(Text)
    time = Column(Integer)
    relative_time = Column(String)
    fetched_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
