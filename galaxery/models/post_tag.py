from datetime import datetime, UTC
from sqlalchemy import DateTime, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from galaxery.db.database import Base

class PostTag(Base):
    """Post-tag association, one row per (post, tag) pair"""
    __tablename__ = "post_tags"
    __table_args__ = (UniqueConstraint("post_id", "tag_id", name="uq_post_tag"),)

    # autoincrement id keeps the order the tags were typed in
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, index=True)  # not using foreign key, only store post ID
    tag_id: Mapped[int] = mapped_column(Integer, index=True)  # not using foreign key, only store tag ID
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))
