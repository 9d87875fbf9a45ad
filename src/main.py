"""
Main entry point for the Prompt Lab Engine FastAPI application.
Serves avatar uploads to Google Cloud Storage.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.logging import configure_logging, get_logger
from config.config import Storage_Config
from config.settings import load_settings
from services.storage_service import StorageService, create_storage_client

settings = load_settings()

configure_logging(env=settings.app_env, level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup/shutdown).
    Creates the storage service unless one was installed beforehand.
    """
    logger.info("Application startup initiated")

    if getattr(app.state, "storage_service", None) is None:
        if not settings.gcs_bucket_name:
            logger.warning("GCS_BUCKET_NAME not configured, avatar uploads disabled")
            app.state.storage_service = None
        else:
            try:
                client = create_storage_client(settings)
                app.state.storage_service = StorageService(client, settings.gcs_bucket_name)
                logger.info(
                    "Storage service initialized", extra={"bucket": settings.gcs_bucket_name}
                )
            except Exception as e:
                logger.critical("Failed to initialize storage service", extra={"error": str(e)})
                raise

    logger.info("Application startup complete")

    yield

    logger.info("Application shutdown complete")


app = FastAPI(
    title="Prompt Lab Engine",
    description="Avatar uploads to Google Cloud Storage",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.storage_service = None


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Report malformed requests (e.g. 'avatar' sent as a text field) as 400 {error}.
    """
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "errors": [e.get("msg") for e in exc.errors()]},
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


def _stream_size(upload: UploadFile) -> int:
    stream = upload.file
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(0)
    return size


@app.post("/users/{user_id}/avatar")
async def upload_avatar(
    request: Request,
    user_id: str,
    avatar: Optional[UploadFile] = File(None, alias=Storage_Config.AVATAR_FORM_FIELD),
):
    """
    Store the multipart 'avatar' file in the bucket and return its public URL.
    """
    if avatar is None or not avatar.filename:
        logger.warning("Avatar upload without file", extra={"user_id": user_id})
        return JSONResponse(status_code=400, content={"error": "No avatar file provided"})

    try:
        if await run_in_threadpool(_stream_size, avatar) == 0:
            logger.warning("Empty avatar upload", extra={"user_id": user_id})
            return JSONResponse(status_code=400, content={"error": "Avatar file is empty"})

        storage_service = request.app.state.storage_service
        if storage_service is None:
            raise RuntimeError("Storage service is not configured")

        avatar_url = await run_in_threadpool(
            storage_service.upload_avatar, user_id, avatar.filename, avatar.file
        )
    except Exception as e:
        logger.error(
            "Avatar upload failed",
            extra={"user_id": user_id, "error": str(e)},
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": "Failed to upload avatar"})
    finally:
        await avatar.close()

    logger.info("Avatar uploaded", extra={"user_id": user_id, "url": avatar_url})
    return {"message": "Avatar uploaded successfully", "avatar_url": avatar_url}


@app.get("/health")
def health():
    return {"status": "ok"}
