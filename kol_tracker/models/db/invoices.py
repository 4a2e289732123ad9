from __future__ import annotations
"""SQLAlchemy model for KOL invoices (budget tracker)."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, Text, ForeignKey, Date, DateTime, Enum, Numeric
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .kols import KOLProfile
from sqlalchemy.sql import func
from kol_tracker.database import Base
from .enums import InvoiceStatus, BudgetPeriod

class Invoice(Base):
    __tablename__ = "invoices"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    kol_id: Mapped[int] = mapped_column(Integer, ForeignKey("kol_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    status: Mapped[InvoiceStatus] = mapped_column(Enum(InvoiceStatus), default=InvoiceStatus.PENDING, index=True)
    budget_period: Mapped[BudgetPeriod] = mapped_column(Enum(BudgetPeriod), default=BudgetPeriod.ONE_TIME)
    due_date: Mapped[Date | None] = mapped_column(Date, nullable=True)
    paid_date: Mapped[Date | None] = mapped_column(Date, nullable=True)
    invoice_number: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    kol: Mapped["KOLProfile"] = relationship("KOLProfile", back_populates="invoices")
