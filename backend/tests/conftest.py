"""Shared test fixtures.

Every test gets its own FileStore, wired into the app through
dependency_overrides so no state leaks between tests.
"""
import pytest
from httpx import ASGITransport, AsyncClient

from app.dependencies import get_file_store, get_upload_service
from app.main import app
from app.services.file_store import FileStore
from app.services.upload_service import FileUploadService


@pytest.fixture
def make_pdf():
    """Factory for bytes that start like a PDF, padded to exactly `size`."""
    def _make(size: int) -> bytes:
        header = b"%PDF-1.4\n"
        if size <= len(header):
            return header[:size]
        return header + b"0" * (size - len(header))
    return _make


@pytest.fixture
def store():
    return FileStore()


@pytest.fixture
def upload_service():
    return FileUploadService()


@pytest.fixture
async def client(store, upload_service):
    """Async test client bound to a fresh store."""
    app.dependency_overrides[get_file_store] = lambda: store
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def upload(client, make_pdf):
    """POST one file to the upload endpoint; defaults to a 100-byte PDF."""
    async def _upload(name="report.pdf", data=None, content_type="application/pdf", headers=None):
        if data is None:
            data = make_pdf(100)
        return await client.post(
            "/api/files/upload",
            files={"file": (name, data, content_type)},
            headers=headers,
        )
    return _upload
