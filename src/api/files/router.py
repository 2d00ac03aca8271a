"""Object storage browser: list, upload and signed downloads."""

from fastapi import APIRouter, File, Query, Request, UploadFile, status

from src.api.core.constants import (
    DEFAULT_LIST_OBJECTS_MAX_KEYS,
    DEFAULT_SIGNED_URL_EXPIRY_SECONDS,
    MAX_UPLOAD_SIZE,
)
from src.api.core.dependencies import CurrentUserAuthDep, StorageClientDep
from src.api.core.messages import APIResponse, MessageCode
from src.api.files.models import DownloadUrlModel, StoredObjectModel
from src.api.files.requests import (
    DownloadUrlResponse,
    FileListResponse,
    FileUploadResponse,
)
from src.api.files.validators import safe_filename, validate_upload

router = APIRouter(prefix="/files", tags=["files"])


def upload_key(user_id, filename: str | None) -> str:
    return f"uploads/{user_id}/{safe_filename(filename)}"


@router.get("", response_model=FileListResponse)
async def list_files(
    request: Request,
    current_user: CurrentUserAuthDep,
    storage: StorageClientDep,
    prefix: str = Query(default="", max_length=1024),
    max_keys: int = Query(default=DEFAULT_LIST_OBJECTS_MAX_KEYS, ge=1, le=1000),
) -> FileListResponse:
    objects = await storage.list_objects(prefix=prefix, max_keys=max_keys)
    return APIResponse.success(
        data=[StoredObjectModel.model_validate(item) for item in objects]
    )


@router.post(
    "", response_model=FileUploadResponse, status_code=status.HTTP_201_CREATED
)
async def upload_file(
    request: Request,
    current_user: CurrentUserAuthDep,
    storage: StorageClientDep,
    file: UploadFile = File(...),
) -> FileUploadResponse:
    """Store a file under the uploader's prefix."""
    content = await validate_upload(file, MAX_UPLOAD_SIZE)
    stored = await storage.upload_object(
        upload_key(current_user.user.id, file.filename),
        content,
        content_type=file.content_type,
    )
    return APIResponse.success(
        message_code=MessageCode.FILE_UPLOADED,
        data=StoredObjectModel.model_validate(stored),
    )


@router.get("/download", response_model=DownloadUrlResponse)
async def get_download_url(
    request: Request,
    current_user: CurrentUserAuthDep,
    storage: StorageClientDep,
    key: str = Query(..., min_length=1, max_length=1024),
    expires_in: int = Query(
        default=DEFAULT_SIGNED_URL_EXPIRY_SECONDS, ge=60, le=7 * 24 * 3600
    ),
) -> DownloadUrlResponse:
    url = await storage.create_signed_download_url(key, expires_in=expires_in)
    return APIResponse.success(
        data=DownloadUrlModel(key=key, url=url, expires_in=expires_in)
    )
