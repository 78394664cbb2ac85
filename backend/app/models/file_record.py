"""FileRecord model - file metadata plus the base64 payload, held in memory."""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

VIEW_PATH_PREFIX = "/api/files/view/"


def virtual_path(file_name: str) -> str:
    return f"{VIEW_PATH_PREFIX}{file_name}"


@dataclass
class NewFile:
    """Everything the upload handler knows before the store assigns id and time."""
    original_name: str
    file_name: str
    file_size: int
    mime_type: str
    file_data: Optional[str] = None
    file_path: str = ""

    def __post_init__(self):
        if not self.file_path:
            self.file_path = virtual_path(self.file_name)


@dataclass
class FileRecord:
    id: int
    original_name: str
    file_name: str  # server-generated unique name
    file_path: str
    file_size: int
    mime_type: str
    upload_time: datetime
    file_data: Optional[str] = None  # base64 encoded payload

    @classmethod
    def from_new(cls, new_file: NewFile, id: int, upload_time: datetime) -> "FileRecord":
        return cls(
            id=id,
            original_name=new_file.original_name,
            file_name=new_file.file_name,
            file_path=new_file.file_path,
            file_size=new_file.file_size,
            mime_type=new_file.mime_type,
            upload_time=upload_time,
            file_data=new_file.file_data,
        )

    def without_payload(self) -> "FileRecord":
        """Copy for metadata responses; the payload only travels through view/download."""
        return replace(self, file_data=None)
