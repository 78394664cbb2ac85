"""In-memory models for uploaded files."""
from app.models.file_record import FileRecord, NewFile, virtual_path

__all__ = ["FileRecord", "NewFile", "virtual_path"]
