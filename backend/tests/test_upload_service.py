"""Tests for upload validation, naming and payload encoding."""
import io

import pytest
from fastapi import UploadFile

from app.errors import ValidationError
from app.services.file_store import FileStore
from app.services.upload_service import (
    FileUploadService,
    decode_payload,
    encode_payload,
    make_stored_name,
    sanitize_filename,
)


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------

def test_sanitize_keeps_safe_characters():
    assert sanitize_filename("Report-2024.v2.pdf") == "Report-2024.v2.pdf"


def test_sanitize_replaces_everything_else():
    assert sanitize_filename("my report (final)!!.pdf") == "my_report__final___.pdf"


def test_sanitize_replaces_non_ascii():
    assert sanitize_filename("résumé.pdf") == "r_sum_.pdf"


def test_stored_name_is_timestamp_prefixed():
    assert make_stored_name("my report (final)!!.pdf", 1700000000000) == (
        "1700000000000_my_report__final___.pdf"
    )


def test_stored_name_skips_live_collisions():
    store = FileStore()
    service = FileUploadService(clock_millis=lambda: 1000)
    first = service.store(store, b"%PDF", "a.pdf", "application/pdf")
    second = service.store(store, b"%PDF", "a.pdf", "application/pdf")
    assert first.file_name == "1000_a.pdf"
    assert second.file_name == "1001_a.pdf"


# ---------------------------------------------------------------------------
# Payload encoding
# ---------------------------------------------------------------------------

def test_payload_round_trip():
    data = bytes(range(256))
    assert decode_payload(encode_payload(data)) == data


def test_decode_absent_payload():
    assert decode_payload(None) is None


def test_decode_invalid_payload():
    assert decode_payload("not base64!!") is None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def test_rejects_non_pdf_regardless_of_content():
    store = FileStore()
    service = FileUploadService()
    with pytest.raises(ValidationError) as exc_info:
        service.store(store, b"%PDF-1.4 real pdf bytes", "a.pdf", "text/plain")
    assert exc_info.value.message == "Only PDF files are allowed"
    assert exc_info.value.status_code == 400
    assert len(store) == 0


def test_rejects_oversized_payload():
    store = FileStore()
    service = FileUploadService(max_bytes=10)
    with pytest.raises(ValidationError):
        service.store(store, b"x" * 11, "a.pdf", "application/pdf")
    assert len(store) == 0


def test_accepts_payload_at_limit():
    store = FileStore()
    service = FileUploadService(max_bytes=10)
    record = service.store(store, b"x" * 10, "a.pdf", "application/pdf")
    assert record.file_size == 10


def test_type_checked_before_size():
    service = FileUploadService(max_bytes=1)
    with pytest.raises(ValidationError) as exc_info:
        service.store(FileStore(), b"xx", "a.txt", "text/plain")
    assert exc_info.value.message == "Only PDF files are allowed"


def test_default_size_message():
    assert FileUploadService().size_error_message == "File size exceeds 10MB limit"


def test_store_records_metadata():
    store = FileStore()
    record = FileUploadService().store(store, b"%PDF-1.4", "report.pdf", "application/pdf")
    assert record.original_name == "report.pdf"
    assert record.file_size == 8
    assert record.mime_type == "application/pdf"
    assert decode_payload(record.file_data) == b"%PDF-1.4"
    assert record.file_path == f"/api/files/view/{record.file_name}"


# ---------------------------------------------------------------------------
# Chunked reading
# ---------------------------------------------------------------------------

async def test_read_collects_all_chunks():
    service = FileUploadService(chunk_size=3)
    upload = UploadFile(file=io.BytesIO(b"abcdefgh"), filename="a.pdf")
    assert await service.read(upload) == b"abcdefgh"


async def test_read_stops_past_limit():
    service = FileUploadService(max_bytes=5, chunk_size=2)
    upload = UploadFile(file=io.BytesIO(b"abcdefgh"), filename="a.pdf")
    with pytest.raises(ValidationError):
        await service.read(upload)


async def test_read_uses_declared_size():
    service = FileUploadService(max_bytes=5)
    upload = UploadFile(file=io.BytesIO(b""), filename="a.pdf", size=6)
    with pytest.raises(ValidationError):
        await service.read(upload)


# ---------------------------------------------------------------------------
# Declared request length
# ---------------------------------------------------------------------------

def test_content_length_within_allowance():
    service = FileUploadService(max_bytes=100, multipart_overhead=50)
    service.check_content_length("150")
    service.check_content_length(None)


def test_content_length_over_allowance():
    service = FileUploadService(max_bytes=100, multipart_overhead=50)
    with pytest.raises(ValidationError):
        service.check_content_length("151")


def test_content_length_not_a_number():
    with pytest.raises(ValidationError) as exc_info:
        FileUploadService().check_content_length("lots")
    assert exc_info.value.message == "Invalid request"
