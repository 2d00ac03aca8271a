from src.api.core.messages import APIResponse
from src.api.files.models import DownloadUrlModel, StoredObjectModel

FileListResponse = APIResponse[list[StoredObjectModel]]
FileUploadResponse = APIResponse[StoredObjectModel]
DownloadUrlResponse = APIResponse[DownloadUrlModel]
