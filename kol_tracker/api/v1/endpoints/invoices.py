"""
Invoice endpoints backing the budget tracker.

Plain database CRUD: invoices never feed the roster metrics (post cost does).
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from sqlalchemy.orm import Session
import time
from kol_tracker.api.deps import get_db, get_pagination_params
from kol_tracker.config import DOCUMENT_SETTINGS
from kol_tracker.models.db import Invoice, KOLProfile
from kol_tracker.models.db.enums import InvoiceStatus
from kol_tracker.models.schemas.invoices import InvoiceCreate, InvoiceUpdate, InvoiceRead, BudgetSummaryRead
from kol_tracker.services.budget import summarize_budget
from kol_tracker.utils import get_logger, log_business_event, log_performance, utc_now

router = APIRouter()
logger = get_logger(__name__)

def _get_invoice_or_404(db: Session, invoice_id: int, request_id: str) -> Invoice:
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if not invoice:
        logger.warning("Invoice not found", invoice_id=invoice_id, request_id=request_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invoice with id {invoice_id} not found"
        )
    return invoice

@router.post(
    "/",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create invoice"
)
async def create_invoice(
    invoice_data: InvoiceCreate,
    request: Request,
    db: Session = Depends(get_db)
) -> InvoiceRead:
    """Record an invoice for a KOL."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "Invoice creation started",
        kol_id=invoice_data.kol_id,
        amount=invoice_data.amount,
        request_id=request_id
    )

    try:
        kol = db.query(KOLProfile).filter(KOLProfile.id == invoice_data.kol_id).first()
        if not kol:
            logger.warning(
                "Invoice creation failed: KOL not found",
                kol_id=invoice_data.kol_id,
                request_id=request_id
            )
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"KOL with id {invoice_data.kol_id} not found"
            )

        if invoice_data.invoice_number:
            existing = db.query(Invoice).filter(Invoice.invoice_number == invoice_data.invoice_number).first()
            if existing:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Invoice number '{invoice_data.invoice_number}' already exists"
                )

        invoice_dict = invoice_data.model_dump()
        invoice_dict["currency"] = (invoice_dict.get("currency") or DOCUMENT_SETTINGS["default_currency"]).upper()
        invoice = Invoice(**invoice_dict)
        db.add(invoice)
        db.commit()
        db.refresh(invoice)

        log_business_event(
            event_type="invoice_created",
            details={
                "invoice_id": invoice.id,
                "kol_id": invoice.kol_id,
                "amount": invoice.amount,
                "status": invoice.status
            },
            request_id=request_id
        )

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="create_invoice",
            duration_ms=duration_ms,
            additional_data={"invoice_id": invoice.id}
        )

        return InvoiceRead.model_validate(invoice)

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(
            "Invoice creation failed with unexpected error",
            kol_id=invoice_data.kol_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during invoice creation, please retry"
        )

@router.get(
    "/",
    response_model=List[InvoiceRead],
    summary="List invoices"
)
async def list_invoices(
    request: Request,
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    kol_id: Optional[int] = Query(None, description="Filter by KOL ID"),
    pagination: dict = Depends(get_pagination_params),
    db: Session = Depends(get_db)
) -> List[InvoiceRead]:
    """List invoices, newest first."""
    request_id = request.headers.get("X-Request-ID", "unknown")

    try:
        query = db.query(Invoice)
        if status_filter:
            query = query.filter(Invoice.status == status_filter)
        if kol_id:
            query = query.filter(Invoice.kol_id == kol_id)

        invoices = (
            query.order_by(Invoice.created_at.desc(), Invoice.id.desc())
            .offset(pagination["offset"])
            .limit(pagination["limit"])
            .all()
        )
        return [InvoiceRead.model_validate(invoice) for invoice in invoices]

    except Exception as e:
        logger.error(
            "Invoice list failed",
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while listing invoices"
        )

@router.get(
    "/summary",
    response_model=BudgetSummaryRead,
    summary="Budget summary",
    description="Total, paid, pending and overdue amounts across invoices"
)
async def get_budget_summary(
    request: Request,
    kol_id: Optional[int] = Query(None, description="Restrict to one KOL"),
    db: Session = Depends(get_db)
) -> BudgetSummaryRead:
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    try:
        query = db.query(Invoice)
        if kol_id:
            query = query.filter(Invoice.kol_id == kol_id)
        summary = summarize_budget(query.all())

        log_performance(
            operation="budget_summary",
            duration_ms=(time.time() - start_time) * 1000,
            additional_data={"invoice_count": summary.invoice_count}
        )
        return BudgetSummaryRead.model_validate(summary)

    except Exception as e:
        logger.error(
            "Budget summary failed",
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while computing the budget summary"
        )

@router.get(
    "/{invoice_id}",
    response_model=InvoiceRead,
    summary="Get invoice"
)
async def get_invoice(
    invoice_id: int,
    request: Request,
    db: Session = Depends(get_db)
) -> InvoiceRead:
    request_id = request.headers.get("X-Request-ID", "unknown")
    return InvoiceRead.model_validate(_get_invoice_or_404(db, invoice_id, request_id))

@router.patch(
    "/{invoice_id}",
    response_model=InvoiceRead,
    summary="Update invoice",
    description="Partial update; marking an invoice paid without a paid_date stamps today"
)
async def update_invoice(
    invoice_id: int,
    invoice_data: InvoiceUpdate,
    request: Request,
    db: Session = Depends(get_db)
) -> InvoiceRead:
    """Update an invoice's status, amount, dates or notes."""
    request_id = request.headers.get("X-Request-ID", "unknown")

    try:
        invoice = _get_invoice_or_404(db, invoice_id, request_id)
        previous_status = invoice.status

        update_data = invoice_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(invoice, field, value)

        if invoice.status == InvoiceStatus.PAID and invoice.paid_date is None:
            invoice.paid_date = utc_now().date()

        db.commit()
        db.refresh(invoice)

        if previous_status != invoice.status:
            log_business_event(
                event_type="invoice_status_changed",
                details={
                    "invoice_id": invoice.id,
                    "kol_id": invoice.kol_id,
                    "old_status": previous_status,
                    "new_status": invoice.status
                },
                request_id=request_id
            )

        return InvoiceRead.model_validate(invoice)

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(
            "Invoice update failed with unexpected error",
            invoice_id=invoice_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during invoice update, please retry"
        )

@router.delete(
    "/{invoice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete invoice"
)
async def delete_invoice(
    invoice_id: int,
    request: Request,
    db: Session = Depends(get_db)
):
    request_id = request.headers.get("X-Request-ID", "unknown")

    try:
        invoice = _get_invoice_or_404(db, invoice_id, request_id)
        db.delete(invoice)
        db.commit()

        log_business_event(
            event_type="invoice_deleted",
            details={"invoice_id": invoice_id},
            request_id=request_id
        )

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(
            "Invoice deletion failed with unexpected error",
            invoice_id=invoice_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during invoice deletion, please retry"
        )
