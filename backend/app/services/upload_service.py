"""Upload validation, stored-name generation and payload encoding."""
import base64
import binascii
import logging
import re
import time
from typing import Callable, Optional

from fastapi import UploadFile

from app.config import settings
from app.errors import ValidationError
from app.models.file_record import FileRecord, NewFile
from app.services.file_store import FileStore

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.-]")


def sanitize_filename(name: str) -> str:
    """Replace every character outside [A-Za-z0-9.-] with an underscore."""
    return _UNSAFE_CHARS.sub("_", name)


def make_stored_name(original_name: str, epoch_millis: int) -> str:
    return f"{epoch_millis}_{sanitize_filename(original_name)}"


def encode_payload(contents: bytes) -> str:
    return base64.b64encode(contents).decode("ascii")


def decode_payload(file_data: Optional[str]) -> Optional[bytes]:
    """Decode a stored payload. None when it is absent or not valid base64."""
    if file_data is None:
        return None
    try:
        return base64.b64decode(file_data, validate=True)
    except (binascii.Error, ValueError):
        logger.error("Stored payload is not valid base64")
        return None


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class FileUploadService:
    """Validates a single uploaded file and stores it in a FileStore."""

    def __init__(
        self,
        max_bytes: int = settings.MAX_UPLOAD_BYTES,
        allowed_mime_type: str = settings.ALLOWED_MIME_TYPE,
        chunk_size: int = settings.UPLOAD_CHUNK_SIZE,
        multipart_overhead: int = settings.MULTIPART_OVERHEAD_BYTES,
        clock_millis: Callable[[], int] = _epoch_millis,
    ):
        self.max_bytes = max_bytes
        self.allowed_mime_type = allowed_mime_type
        self.chunk_size = chunk_size
        self.multipart_overhead = multipart_overhead
        self._clock_millis = clock_millis

    @property
    def size_error_message(self) -> str:
        return f"File size exceeds {self.max_bytes // (1024 * 1024)}MB limit"

    def check_content_type(self, content_type: Optional[str]) -> None:
        if content_type != self.allowed_mime_type:
            logger.warning("Rejected upload with content type %r", content_type)
            raise ValidationError("Only PDF files are allowed")

    def check_size(self, size: int) -> None:
        if size > self.max_bytes:
            logger.warning("Rejected upload of %d bytes (limit %d)", size, self.max_bytes)
            raise ValidationError(self.size_error_message)

    def check_content_length(self, content_length: Optional[str]) -> None:
        """Reject a request body that cannot hold a file under the cap, before it is received.

        Bodies without a Content-Length (chunked transfer) fall through to the
        per-file check in read().
        """
        if content_length is None:
            return
        try:
            length = int(content_length)
        except ValueError:
            raise ValidationError("Invalid request")
        if length > self.max_bytes + self.multipart_overhead:
            logger.warning("Rejected upload request of %d bytes before reading it", length)
            raise ValidationError(self.size_error_message)

    async def read(self, upload: UploadFile) -> bytes:
        """Copy the parsed upload into memory, stopping as soon as the limit is passed."""
        if upload.size is not None:
            self.check_size(upload.size)

        buffer = bytearray()
        while True:
            chunk = await upload.read(self.chunk_size)
            if not chunk:
                break
            buffer.extend(chunk)
            self.check_size(len(buffer))
        return bytes(buffer)

    def stored_name_for(self, store: FileStore, original_name: str) -> str:
        """Timestamp-prefixed sanitized name, bumped past any live record using it."""
        millis = self._clock_millis()
        name = make_stored_name(original_name, millis)
        while store.has_stored_name(name):
            millis += 1
            name = make_stored_name(original_name, millis)
        return name

    def store(
        self,
        store: FileStore,
        contents: bytes,
        original_name: str,
        content_type: Optional[str],
    ) -> FileRecord:
        """Validate type then size, and create exactly one record on success."""
        self.check_content_type(content_type)
        self.check_size(len(contents))

        new_file = NewFile(
            original_name=original_name,
            file_name=self.stored_name_for(store, original_name),
            file_size=len(contents),
            mime_type=content_type,
            file_data=encode_payload(contents),
        )
        return store.create(new_file)


upload_service = FileUploadService()
