"""SQLAlchemy database models."""

from datetime import UTC, datetime

import uuid_utils.compat as uuid
from sqlalchemy import Column, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

USER_ID_MAX_LENGTH = 64

Base = declarative_base()


class ConversionHistory(Base):
    """One archived conversion attempt, bucketed by user and date."""

    __tablename__ = "conversion_history"
    __table_args__ = (Index("ix_conversion_history_user_date", "user_id", "conversion_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    record_id = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid7()))
    user_id = Column(String(USER_ID_MAX_LENGTH), nullable=False)
    session_id = Column(String(36), nullable=True)
    conversion_date = Column(Date, nullable=False)
    sequence = Column(Integer, nullable=False)
    input_value = Column(Text, nullable=False)
    source_base = Column(Integer, nullable=False)
    target_base = Column(Integer, nullable=False)
    result = Column(Text, nullable=False, default="")
    error_message = Column(Text, nullable=False, default="")
    error_kind = Column(String(32), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    def __repr__(self) -> str:
        """Return string representation of ConversionHistory."""
        return (
            f"<ConversionHistory("
            f"id={self.id}, "
            f"record_id='{self.record_id}', "
            f"user_id='{self.user_id}', "
            f"conversion_date={self.conversion_date}, "
            f"sequence={self.sequence}, "
            f"source_base={self.source_base}, "
            f"target_base={self.target_base}"
            f")>"
        )
