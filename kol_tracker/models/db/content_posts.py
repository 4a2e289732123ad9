from __future__ import annotations
"""SQLAlchemy model for tracked content posts and their reach/cost figures."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, Text, ForeignKey, Date, DateTime, Enum, Numeric
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .kols import KOLProfile
from sqlalchemy.sql import func
from kol_tracker.database import Base
from .enums import SocialPlatform

class ContentPost(Base):
    __tablename__ = "content_posts"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    kol_id: Mapped[int] = mapped_column(Integer, ForeignKey("kol_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    platform: Mapped[SocialPlatform] = mapped_column(Enum(SocialPlatform), nullable=False)
    url: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str | None] = mapped_column(String, nullable=True)
    posted_date: Mapped[Date] = mapped_column(Date, nullable=False)

    impressions: Mapped[int] = mapped_column(Integer, default=0)
    engagement: Mapped[int | None] = mapped_column(Integer, nullable=True)
    clicks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cost: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    kol: Mapped["KOLProfile"] = relationship("KOLProfile", back_populates="posts")
