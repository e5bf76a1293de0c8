from datetime import datetime, UTC
from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from galaxery.db.database import Base

TAG_MARKER = "#"
MAX_TAG_LENGTH = 64

class Tag(Base):
    """Tag vocabulary entry

    Names are canonical (lowercase, single leading marker) and never change.
    Rows are created on first use and never deleted.
    """
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(MAX_TAG_LENGTH), unique=True, nullable=False)  # tag name must be unique
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))
