import re

from fastapi import UploadFile, status

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str | None) -> str:
    """Strip directories and unusual characters from a client filename."""
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = UNSAFE_FILENAME_CHARS.sub("-", name).strip(".-")
    return name or "upload"


async def validate_upload(file: UploadFile, max_size_bytes: int) -> bytes:
    """Read an uploaded file, rejecting empty and oversized ones."""
    content = await file.read()

    if not content:
        raise IridiumException(
            MessageCode.INVALID_INPUT,
            status.HTTP_400_BAD_REQUEST,
            {"field": "file", "reason": "File is empty"},
        )

    if len(content) > max_size_bytes:
        raise IridiumException(
            MessageCode.FILE_TOO_LARGE,
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            {"max_size_bytes": max_size_bytes},
        )

    return content
