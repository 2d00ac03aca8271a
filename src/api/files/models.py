from datetime import datetime

from pydantic import BaseModel


class StoredObjectModel(BaseModel):
    key: str
    size: int
    last_modified: datetime | None = None

    model_config = {"from_attributes": True}


class DownloadUrlModel(BaseModel):
    key: str
    url: str
    expires_in: int
