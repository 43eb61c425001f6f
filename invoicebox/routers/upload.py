"""Upload endpoints: client spreadsheets and branding logos."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Annotated

import aiofiles
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from invoicebox.config import settings
from invoicebox.schemas.upload import ImportDebug, ImportDetails, ImportResponse, LogoUploadResponse
from invoicebox.services.auth import RequireAuth
from invoicebox.services.import_service import (
    ALLOWED_IMPORT_EXTENSIONS,
    ClientImporter,
    ClientRepository,
    DebugFileObserver,
    LoggingObserver,
    SpreadsheetError,
    file_extension,
    get_client_repository,
    remove_temp_file,
)
from invoicebox.services.logo_storage import LogoStorageService
from invoicebox.services.plans import QuotaExceededError, can_upload_logo

logger = logging.getLogger(__name__)

router = APIRouter()

CHUNK_SIZE = 64 * 1024


@router.post("/clients", response_model=ImportResponse)
async def import_clients(
    current_user: RequireAuth,
    repository: Annotated[ClientRepository, Depends(get_client_repository)],
    file: UploadFile | None = File(None, description="XLSX, XLS or CSV spreadsheet"),
) -> ImportResponse:
    """Import clients from a spreadsheet.

    The header row is located automatically and columns are matched to
    client fields by name and content. Rows are inserted all at once, or
    not at all if the plan's client limit would be exceeded.
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    ext = file_extension(file.filename)
    if ext not in ALLOWED_IMPORT_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type '.{ext}'. Allowed: XLSX, XLS, CSV",
        )

    max_size = settings.max_upload_size_bytes
    uploads_dir = settings.uploads_dir
    uploads_dir.mkdir(parents=True, exist_ok=True)
    temp_path = uploads_dir / f"import-{uuid.uuid4()}.{ext}"

    try:
        # Stream to disk in chunks to avoid unbounded memory for oversized files
        total_size = 0
        async with aiofiles.open(temp_path, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > max_size:
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=f"File exceeds maximum size of {max_size // (1024 * 1024)} MB",
                    )
                await out.write(chunk)

        if settings.import_debug_log:
            observer = DebugFileObserver(settings.log_dir)
        else:
            observer = LoggingObserver()
        importer = ClientImporter(repository, observer=observer)

        try:
            result = await importer.import_file(temp_path, current_user.id, current_user.plan)
        except SpreadsheetError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except QuotaExceededError as e:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
        except Exception as e:
            logger.exception("Client import failed for owner %s", current_user.id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error processing import file: {e}",
            )
    finally:
        remove_temp_file(temp_path)

    return ImportResponse(
        message=result.message,
        details=ImportDetails(
            mapped_fields=result.mapped_fields,
            total_rows=result.total_rows,
            imported=result.imported_count,
            debug=ImportDebug(
                headers=result.headers,
                header_map=result.header_map,
                sample_row=result.sample_row,
                header_row_index=result.header_row_index,
            ),
        ),
    )


@router.post("/logo", response_model=LogoUploadResponse)
async def upload_logo(
    current_user: RequireAuth,
    logo: UploadFile | None = File(None, description="JPG or PNG logo"),
) -> LogoUploadResponse:
    """Upload a branding logo for invoices and reminder emails (PRO only)."""
    if not can_upload_logo(current_user.plan):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Custom branding is only available on the Pro plan",
        )
    if logo is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    storage = LogoStorageService()
    filename = await storage.save_logo(logo)
    url = storage.get_logo_url(filename)

    current_user.logo_url = url
    current_user.updated_at = datetime.now(timezone.utc)
    await current_user.save()

    logger.info("Stored logo %s for user %s", filename, current_user.id)
    return LogoUploadResponse(url=url)
