"""Budget tracker summary over invoices.

Paid is status ``paid``; pending is anything not yet paid; overdue is the
``not_paid`` terminal state. Amounts go through the same normalization as
the metrics layer, so a corrupt row counts as 0 instead of failing the page.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from kol_tracker.models.db.enums import InvoiceStatus
from kol_tracker.utils.metrics import non_negative


@dataclass(frozen=True)
class BudgetSummary:
    total_budget: float = 0.0
    total_paid: float = 0.0
    total_pending: float = 0.0
    overdue_amount: float = 0.0
    invoice_count: int = 0
    counts_by_status: dict[InvoiceStatus, int] = field(
        default_factory=lambda: {s: 0 for s in InvoiceStatus}
    )


def summarize_budget(invoices: Iterable[object]) -> BudgetSummary:
    """Fold invoice rows (ORM objects or anything with ``amount``/``status``)."""
    total = paid = pending = overdue = 0.0
    count = 0
    counts = {s: 0 for s in InvoiceStatus}

    for invoice in invoices:
        amount = float(non_negative(getattr(invoice, "amount", None)))
        status = InvoiceStatus(getattr(invoice, "status", InvoiceStatus.PENDING))
        count += 1
        counts[status] += 1
        total += amount
        if status is InvoiceStatus.PAID:
            paid += amount
        else:
            pending += amount
        if status is InvoiceStatus.NOT_PAID:
            overdue += amount

    return BudgetSummary(
        total_budget=total,
        total_paid=paid,
        total_pending=pending,
        overdue_amount=overdue,
        invoice_count=count,
        counts_by_status=counts,
    )


__all__ = ["BudgetSummary", "summarize_budget"]
