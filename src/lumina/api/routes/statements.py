from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from lumina.api.dependencies import dump, get_ingestion, http_error
from lumina.core import settings
from lumina.errors import LuminaError
from lumina.logger import get_logger
from lumina.services.ingestion import StatementIngestion

logger = get_logger(__name__)

router = APIRouter()

_ACCEPTED_PREFIXES = ("image/", "application/pdf")


@router.post("/api/statements")
async def upload_statement(
    ingestion: Annotated[StatementIngestion, Depends(get_ingestion)],
    file: Annotated[UploadFile, File()],
) -> dict[str, Any]:
    mime_type = file.content_type or "application/octet-stream"
    if not mime_type.startswith(_ACCEPTED_PREFIXES):
        raise HTTPException(status_code=415, detail=f"Unsupported file type: {mime_type}")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(content) > settings.get_max_upload_bytes():
        raise HTTPException(status_code=413, detail="File too large")

    logger.info("[INGEST] Received '%s' (%s, %d bytes).", file.filename, mime_type, len(content))
    try:
        merged = await ingestion.ingest(content, mime_type, file.filename)
    except LuminaError as exc:
        raise http_error(exc) from exc

    return {"imported": len(merged), "transactions": dump(merged)}


@router.get("/api/statements/status")
async def statement_status(
    ingestion: Annotated[StatementIngestion, Depends(get_ingestion)],
) -> dict[str, Any]:
    return ingestion.get_status()
