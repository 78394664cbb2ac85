"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.dependencies import get_file_store
from app.errors import FileServiceError
from app.schemas.common import HealthResponse
from app.services.file_store import FileStore

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the in-memory file store. Its contents die with the process."""
    app.state.file_store = FileStore()
    logger.info("File store ready (upload limit %d bytes)", settings.MAX_UPLOAD_BYTES)

    yield

    logger.info("Discarding %d stored file(s)", len(app.state.file_store))


app = FastAPI(
    title="PDF Share API",
    version="1.0.0",
    description="Upload PDFs, list them and hand out view/download links.",
    lifespan=lifespan,
)

# CORS
origins = [o.strip() for o in settings.CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every failure leaves as {"message": ...}
@app.exception_handler(FileServiceError)
async def file_service_error_handler(request: Request, exc: FileServiceError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Invalid request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"message": "Invalid request"})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.get("/api/health", response_model=HealthResponse)
async def health_check(store: FileStore = Depends(get_file_store)):
    """Verify the API is up and report how many files are held."""
    return {"status": "ok", "files": len(store)}


# Register routers
from app.routes.files import router as files_router
app.include_router(files_router)
