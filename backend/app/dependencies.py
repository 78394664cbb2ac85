"""FastAPI dependencies.

Usage in routes:
    from app.dependencies import get_file_store

    @router.get("/items")
    async def list_items(store: FileStore = Depends(get_file_store)):
        return store.list()
"""
from fastapi import Request

from app.services.file_store import FileStore
from app.services.upload_service import FileUploadService, upload_service


def get_file_store(request: Request) -> FileStore:
    """The FileStore created in the app lifespan."""
    return request.app.state.file_store


def get_upload_service() -> FileUploadService:
    return upload_service
