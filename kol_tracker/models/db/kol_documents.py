from __future__ import annotations
"""SQLAlchemy model for document metadata (contracts, invoices, MSAs) attached to a KOL."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, Text, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .kols import KOLProfile
from sqlalchemy.sql import func
from kol_tracker.database import Base
from .enums import DocumentType

class KOLDocument(Base):
    __tablename__ = "kol_documents"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    kol_id: Mapped[int] = mapped_column(Integer, ForeignKey("kol_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[DocumentType] = mapped_column(Enum(DocumentType), default=DocumentType.OTHER)
    file_size: Mapped[int] = mapped_column(Integer, default=0)
    # Storage reference returned by the file store; the bytes never pass through here
    file_url: Mapped[str | None] = mapped_column(String, nullable=True)
    file_path: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    kol: Mapped["KOLProfile"] = relationship("KOLProfile", back_populates="documents")
