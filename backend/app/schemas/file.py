"""File response schemas."""
from datetime import datetime
from typing import Optional

from app.schemas.base import CamelORMModel


class FileResponse(CamelORMModel):
    id: int
    original_name: str
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    upload_time: datetime
    file_data: Optional[str] = None


class UploadResponse(FileResponse):
    url: str
