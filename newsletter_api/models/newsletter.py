"""
Newsletter Model
"""

from sqlalchemy import Column, String, Text, Boolean, Integer, ForeignKey, Index
from newsletter_api.models.base import SoftDeleteModel


class Newsletter(SoftDeleteModel):
    """Newsletter owned by a single user"""
    __tablename__ = "newsletters"

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    __table_args__ = (
        Index('ix_newsletter_user_name', 'user_id', 'name'),
    )

    def __repr__(self):
        return f"<Newsletter(id={self.id}, name='{self.name}', user_id={self.user_id})>"
