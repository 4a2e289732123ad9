"""
Pydantic schemas for invoices and the budget summary.
"""
from datetime import date, datetime
from typing import Optional, Dict
from pydantic import BaseModel, Field, ConfigDict
from ..db.enums import InvoiceStatus, BudgetPeriod

class InvoiceCreate(BaseModel):
    kol_id: int = Field(gt=0)
    amount: float = Field(ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: InvoiceStatus = InvoiceStatus.PENDING
    budget_period: BudgetPeriod = BudgetPeriod.ONE_TIME
    due_date: Optional[date] = None
    invoice_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=2000)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "kol_id": 1,
            "amount": 15000,
            "status": "invoiced",
            "budget_period": "monthly",
            "due_date": "2025-12-01",
            "invoice_number": "INV-0042"
        }
    })

class InvoiceUpdate(BaseModel):
    amount: Optional[float] = Field(None, ge=0)
    status: Optional[InvoiceStatus] = None
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    invoice_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=2000)

class InvoiceRead(BaseModel):
    id: int
    kol_id: int
    amount: float
    currency: str
    status: InvoiceStatus
    budget_period: BudgetPeriod
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class BudgetSummaryRead(BaseModel):
    total_budget: float
    total_paid: float
    total_pending: float
    overdue_amount: float
    invoice_count: int
    counts_by_status: Dict[InvoiceStatus, int]

    model_config = ConfigDict(from_attributes=True)
