"""
Document metadata endpoints, nested under a KOL.

Only metadata is stored (name, type, size, storage URL/path). Uploading the
bytes is the file store's job.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Request
import time
from kol_tracker.api.deps import get_roster_service, get_kol_or_404
from kol_tracker.models.schemas.documents import DocumentCreate, DocumentRead
from kol_tracker.models.snapshots import KOLSnapshot
from kol_tracker.services.data_sources import RecordNotFoundError
from kol_tracker.services.roster_service import RosterService
from kol_tracker.utils import get_logger, log_performance

router = APIRouter()
logger = get_logger(__name__)

@router.get(
    "/",
    response_model=List[DocumentRead],
    summary="List documents"
)
async def list_documents(
    kol: KOLSnapshot = Depends(get_kol_or_404)
) -> List[DocumentRead]:
    return [DocumentRead.model_validate(doc) for doc in kol.documents]

@router.post(
    "/",
    response_model=List[DocumentRead],
    status_code=status.HTTP_201_CREATED,
    summary="Attach documents",
    description="Attach document metadata; a missing type is inferred from the filename"
)
async def create_documents(
    kol_id: int,
    docs: List[DocumentCreate],
    request: Request,
    kol: KOLSnapshot = Depends(get_kol_or_404),
    roster: RosterService = Depends(get_roster_service)
) -> List[DocumentRead]:
    """Attach one or more documents to a KOL."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    if not docs:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one document is required"
        )

    logger.info(
        "Document upload started",
        kol_id=kol_id,
        document_count=len(docs),
        request_id=request_id
    )

    try:
        created = await roster.add_documents(kol_id, docs)

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="create_documents",
            duration_ms=duration_ms,
            additional_data={"kol_id": kol_id, "document_count": len(created)}
        )

        logger.info(
            "Documents attached successfully",
            kol_id=kol_id,
            document_types=[doc.type for doc in created],
            request_id=request_id
        )

        return [DocumentRead.model_validate(doc) for doc in created]

    except RecordNotFoundError as e:
        logger.warning("Document upload failed: KOL not in store", kol_id=kol_id, request_id=request_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "Document upload failed with unexpected error",
            kol_id=kol_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while attaching documents, please retry"
        )

@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete document"
)
async def delete_document(
    kol_id: int,
    document_id: int,
    request: Request,
    kol: KOLSnapshot = Depends(get_kol_or_404),
    roster: RosterService = Depends(get_roster_service)
):
    """Remove a document's metadata from a KOL."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    try:
        if roster.get_document(kol_id, document_id) is None:
            logger.warning(
                "Document not found for KOL",
                kol_id=kol_id,
                document_id=document_id,
                request_id=request_id
            )
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Document with id {document_id} not found for KOL {kol_id}"
            )

        await roster.delete_document(kol_id, document_id)

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="delete_document",
            duration_ms=duration_ms,
            additional_data={"kol_id": kol_id, "document_id": document_id}
        )

    except HTTPException:
        raise
    except RecordNotFoundError as e:
        logger.warning("Document deletion failed: not in store", document_id=document_id, request_id=request_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "Document deletion failed with unexpected error",
            kol_id=kol_id,
            document_id=document_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during document deletion, please retry"
        )
