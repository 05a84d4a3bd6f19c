# app/core/storage.py

import uuid
from supabase import create_client, Client
from fastapi import UploadFile, HTTPException
from loguru import logger

from app.core.config import settings

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB cap for report formats

_client: Client | None = None


def get_storage_client() -> Client | None:
    """Lazily creates the Supabase client; returns None when credentials are missing."""
    global _client
    if _client is None and settings.SUPABASE_URL and settings.SUPABASE_KEY:
        try:
            _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        except Exception as e:
            logger.warning(f"Supabase init failed: {e}")
            _client = None
    return _client


async def upload_report_format(file: UploadFile, uploader_id: uuid.UUID) -> str:
    """
    Uploads a report-format PDF to object storage.
    - Validates MIME type and size.
    - Ignores the original filename.
    - Returns the public URL of the stored object.
    """
    client = get_storage_client()
    if not client:
        logger.error("Supabase credentials missing; cannot upload report format.")
        raise HTTPException(500, "Storage service unavailable.")

    if file.content_type != "application/pdf":
        raise HTTPException(400, "Only PDF files are allowed.")

    file_content = await file.read()
    if len(file_content) > MAX_FILE_SIZE:
        raise HTTPException(400, f"File too large. Maximum size is {MAX_FILE_SIZE // (1024*1024)}MB.")

    await file.seek(0)

    file_path = f"{uploader_id}/{uuid.uuid4()}.pdf"
    bucket = client.storage.from_(settings.REPORTS_BUCKET)

    try:
        bucket.upload(
            path=file_path,
            file=file_content,
            file_options={"content-type": "application/pdf", "upsert": "true"}
        )
        return bucket.get_public_url(file_path)

    except Exception as e:
        logger.error(f"Storage upload error: {e}")
        raise HTTPException(500, "Failed to upload document to cloud storage.")
