"""
Feed Model
Source feed scraped into newsletter posts
"""

import enum

from sqlalchemy import Column, String, Boolean, Integer
from newsletter_api.models.base import BaseModel


class Periodicity(enum.IntEnum):
    """How often a feed is refreshed"""
    LAST = 1
    DAILY = 2
    WEEKLY = 3


class DayOfWeek(enum.IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


# Locales whose sources are served as Windows-1252
LEGACY_ENCODING_LOCALES = frozenset({"pt-br", "en-us"})


class Feed(BaseModel):
    __tablename__ = "feeds"

    name = Column(String(255), nullable=True)
    url = Column(String(2048), nullable=True)
    author = Column(String(255), nullable=True)
    partial = Column(Boolean, nullable=True)
    subject = Column(String(255), nullable=True)
    locale = Column(String(16), nullable=True)
    article_selector = Column(String(255), nullable=True)
    max_posts = Column(Integer, nullable=True)
    update_periodicity = Column(Integer, nullable=True)
    day_of_week = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<Feed(name='{self.name}', url='{self.url}')>"

    def get_encoding(self) -> str:
        """Character encoding used to decode the feed source"""
        if (self.locale or "").lower() in LEGACY_ENCODING_LOCALES:
            return "Windows-1252"
        return "UTF-8"
