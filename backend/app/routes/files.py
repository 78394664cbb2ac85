"""Files API routes."""
import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.datastructures import UploadFile

from app.dependencies import get_file_store, get_upload_service
from app.errors import FileServiceError, InternalError, NotFoundError, ValidationError
from app.models.file_record import FileRecord
from app.schemas.common import MessageResponse
from app.schemas.file import FileResponse, UploadResponse
from app.services.file_store import FileStore
from app.services.upload_service import FileUploadService, decode_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/files", tags=["files"])

PDF_MEDIA_TYPE = "application/pdf"
UPLOAD_FIELD = "file"


@router.get("", response_model=list[FileResponse])
async def list_files(store: FileStore = Depends(get_file_store)):
    """List all files, newest first. Payloads are left out."""
    try:
        return [_to_response(f) for f in store.list()]
    except Exception:
        logger.exception("Listing files failed")
        raise InternalError("Failed to retrieve files")


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    request: Request,
    store: FileStore = Depends(get_file_store),
    uploads: FileUploadService = Depends(get_upload_service),
):
    """Upload a single PDF (multipart field "file") and create a file record.

    The form is parsed here rather than through a File() parameter so an
    oversized Content-Length is refused before the body is received.
    """
    uploads.check_content_length(request.headers.get("content-length"))

    async with request.form() as form:
        file = form.get(UPLOAD_FIELD)
        if not isinstance(file, UploadFile) or not file.filename:
            raise ValidationError("No file uploaded")

        try:
            # Reject on type before any bytes are copied
            uploads.check_content_type(file.content_type)
            contents = await uploads.read(file)
            record = uploads.store(store, contents, file.filename, file.content_type)
        except FileServiceError:
            raise
        except Exception:
            logger.exception("Upload of %r failed", file.filename)
            raise InternalError("Failed to upload file")

    return {**_to_response(record), "url": record.file_path}


@router.get("/view/{file_name}")
async def view_file(file_name: str, store: FileStore = Depends(get_file_store)):
    """Serve a stored PDF inline."""
    try:
        record = _find_servable(store, file_name)
        return _pdf_response(record, "inline")
    except FileServiceError:
        raise
    except Exception:
        logger.exception("Serving %s failed", file_name)
        raise InternalError("Failed to serve file")


@router.get("/download/{file_name}")
async def download_file(file_name: str, store: FileStore = Depends(get_file_store)):
    """Serve a stored PDF as an attachment named after the original upload."""
    try:
        record = _find_servable(store, file_name)
        return _pdf_response(record, _attachment_disposition(record.original_name))
    except FileServiceError:
        raise
    except Exception:
        logger.exception("Download of %s failed", file_name)
        raise InternalError("Failed to download file")


@router.get("/{file_id}", response_model=FileResponse)
async def get_file_metadata(file_id: int, store: FileStore = Depends(get_file_store)):
    """Get file metadata by ID."""
    try:
        record = store.get_by_id(file_id)
    except Exception:
        logger.exception("Looking up file %d failed", file_id)
        raise InternalError("Failed to retrieve file")
    if not record:
        raise NotFoundError("File not found")
    return _to_response(record)


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(file_id: int, store: FileStore = Depends(get_file_store)):
    """Delete a file record. The payload lives in the record, so nothing else to clean up."""
    try:
        if not store.get_by_id(file_id):
            raise NotFoundError("File not found")
        deleted = store.delete_by_id(file_id)
    except FileServiceError:
        raise
    except Exception:
        logger.exception("Deleting file %d failed", file_id)
        raise InternalError("Failed to delete file")
    if not deleted:
        # Removed by another request between the lookup and the delete
        raise InternalError("Failed to delete file")

    return {"message": "File deleted successfully"}


def _find_servable(store: FileStore, file_name: str) -> FileRecord:
    record = store.get_by_stored_name(file_name)
    if not record or record.file_data is None:
        raise NotFoundError("File not found")
    return record


def _pdf_response(record: FileRecord, disposition: str) -> Response:
    contents = decode_payload(record.file_data)
    if contents is None:
        raise NotFoundError("File not found")
    return Response(
        content=contents,
        media_type=PDF_MEDIA_TYPE,
        headers={
            "Content-Disposition": disposition,
            "Content-Length": str(len(contents)),
        },
    )


def _attachment_disposition(original_name: str) -> str:
    """attachment; filename="<name>", adding filename* when the name is not latin-1."""
    escaped = original_name.replace("\\", "\\\\").replace('"', '\\"')
    try:
        escaped.encode("latin-1")
    except UnicodeEncodeError:
        fallback = escaped.encode("ascii", "replace").decode("ascii")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(original_name)}"
    return f'attachment; filename="{escaped}"'


def _to_response(record: FileRecord) -> dict:
    return FileResponse.model_validate(record.without_payload()).model_dump()
