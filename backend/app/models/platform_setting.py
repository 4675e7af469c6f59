# backend/app/models/platform_setting.py
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String

from ..database import Base


class PlatformSetting(Base):
    """Key/value store for admin-tunable platform settings."""

    __tablename__ = "platform_settings"

    key = Column(String(64), primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<PlatformSetting {self.key}={self.value!r}>"
