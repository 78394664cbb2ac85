"""Application configuration from environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All config comes from env vars or .env.backend file."""

    # Uploads
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    ALLOWED_MIME_TYPE: str = "application/pdf"
    UPLOAD_CHUNK_SIZE: int = 64 * 1024  # bytes read per chunk while buffering
    MULTIPART_OVERHEAD_BYTES: int = 64 * 1024  # allowance over the cap for multipart framing

    CORS_ORIGINS: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env.backend"
        env_file_encoding = "utf-8"


settings = Settings()
