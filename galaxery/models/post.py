from sqlalchemy import Column, String, DateTime, Integer
from galaxery.db.database import Base
from datetime import datetime, UTC

class Post(Base):
    """Image post model"""
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)  # owner, only the ID is stored
    content_ref = Column(String, nullable=False)  # URL or path of the uploaded image
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC), index=True)
