from __future__ import annotations
"""SQLAlchemy model for tracked influencer (KOL) profiles."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, Text, DateTime, Boolean, Enum
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .kol_platforms import KOLPlatform
    from .content_posts import ContentPost
    from .kol_documents import KOLDocument
    from .invoices import Invoice
from sqlalchemy.sql import func
from kol_tracker.database import Base
from .enums import KOLStatus

class KOLProfile(Base):
    __tablename__ = "kol_profiles"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, index=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    telegram_handle: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[KOLStatus] = mapped_column(Enum(KOLStatus), default=KOLStatus.REACHED, index=True)
    kyc_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Children go with the profile
    platforms: Mapped[list["KOLPlatform"]] = relationship(
        "KOLPlatform", back_populates="kol", cascade="all, delete-orphan"
    )
    posts: Mapped[list["ContentPost"]] = relationship(
        "ContentPost", back_populates="kol", cascade="all, delete-orphan"
    )
    documents: Mapped[list["KOLDocument"]] = relationship(
        "KOLDocument", back_populates="kol", cascade="all, delete-orphan"
    )
    invoices: Mapped[list["Invoice"]] = relationship(
        "Invoice", back_populates="kol", cascade="all, delete-orphan"
    )
