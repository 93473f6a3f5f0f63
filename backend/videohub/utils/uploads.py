"""Staging of multipart uploads on local disk."""

import os
import uuid
from pathlib import Path

from fastapi import UploadFile

from videohub.config import settings

CHUNK_SIZE = 1024 * 1024


async def save_upload_to_temp(file: UploadFile | None) -> str | None:
    """
    Stream an uploaded file into ``settings.upload_temp_dir``.

    Returns the local path, or None when no file (or an empty filename) was
    sent. The media store removes the file once it has been uploaded.
    """
    if file is None or not file.filename:
        return None

    temp_dir = Path(settings.upload_temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)

    local_path = temp_dir / f"{uuid.uuid4()}{Path(file.filename).suffix}"
    with open(local_path, "wb") as buffer:
        while chunk := await file.read(CHUNK_SIZE):
            buffer.write(chunk)

    return str(local_path)


def remove_local_file(local_path: str | None) -> None:
    if local_path and os.path.exists(local_path):
        os.remove(local_path)
