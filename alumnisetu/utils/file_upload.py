"""
File Upload Utility - Save shared resource files to disk.

Supported formats:
- Documents: PDF, Word, PowerPoint, Excel, plain text
- Images: JPEG, PNG, GIF, WebP

Max file size: settings.max_upload_mb (50MB by default)
"""

import os
import re
import time
from datetime import datetime
from fastapi import UploadFile, HTTPException

from alumnisetu.core.config import get_settings

settings = get_settings()

ALLOWED_MIME_TYPES = {
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/vnd.ms-powerpoint',
    'application/vnd.openxmlformats-officedocument.presentationml.presentation',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'text/plain',
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
}

PUBLIC_URL_PREFIX = "/uploads/resources"


def safe_filename(original_name: str, timestamp_ms: int = None) -> str:
    """
    Build the stored filename: <timestamp>_<sanitised base name><ext>.

    Anything outside [a-zA-Z0-9-_] in the base name becomes '_'.
    """
    base, ext = os.path.splitext(os.path.basename(original_name))
    safe_base = re.sub(r'[^a-zA-Z0-9\-_]', '_', base) or 'file'
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{timestamp_ms}_{safe_base}{ext}"


async def save_resource_file(file: UploadFile) -> dict:
    """
    Validate and store an uploaded resource file.

    Args:
        file: FastAPI UploadFile

    Returns:
        dict with filename, originalName, url, size, uploadedAt

    Raises:
        HTTPException on validation errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    if file.content_type not in ALLOWED_MIME_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{file.content_type}'"
        )

    content = await file.read()

    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_upload_mb}MB"
        )
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    os.makedirs(settings.upload_dir, exist_ok=True)
    filename = safe_filename(file.filename)
    with open(os.path.join(settings.upload_dir, filename), 'wb') as out:
        out.write(content)

    return {
        "filename": filename,
        "originalName": file.filename,
        "url": f"{PUBLIC_URL_PREFIX}/{filename}",
        "size": len(content),
        "uploadedAt": datetime.utcnow().isoformat()
    }
