from pydantic import BaseModel


class FeatureFlagModel(BaseModel):
    id: int
    key: str
    name: str
    active: bool
    created_at: str | None = None

    model_config = {"from_attributes": True}
