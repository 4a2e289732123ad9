from __future__ import annotations
"""SQLAlchemy model for a KOL's social platform profile link."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .kols import KOLProfile
from sqlalchemy.sql import func
from kol_tracker.database import Base
from .enums import SocialPlatform

class KOLPlatform(Base):
    __tablename__ = "kol_platforms"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    kol_id: Mapped[int] = mapped_column(Integer, ForeignKey("kol_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    platform: Mapped[SocialPlatform] = mapped_column(Enum(SocialPlatform), nullable=False)
    profile_url: Mapped[str] = mapped_column(String, default="")
    follower_count: Mapped[int] = mapped_column(Integer, default=0)
    username: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    kol: Mapped["KOLProfile"] = relationship("KOLProfile", back_populates="platforms")
