"""
SQLAlchemy Models Package
"""

from newsletter_api.models.user import User
from newsletter_api.models.newsletter import Newsletter
from newsletter_api.models.feed import Feed, Periodicity, DayOfWeek

__all__ = [
    "User",
    "Newsletter",
    "Feed",
    "Periodicity",
    "DayOfWeek",
]
