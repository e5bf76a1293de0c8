from datetime import datetime, UTC
from sqlalchemy import Column, Integer, DateTime

from galaxery.db.database import Base

class Like(Base):
    """A user's like on a post, presence means liked"""
    __tablename__ = "likes"

    user_id = Column(Integer, primary_key=True)
    post_id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))

class Favorite(Base):
    """A user's favorite mark on a post, presence means favorited"""
    __tablename__ = "favorites"

    user_id = Column(Integer, primary_key=True)
    post_id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))
