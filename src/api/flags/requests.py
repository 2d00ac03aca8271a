from pydantic import BaseModel

from src.api.core.messages import APIResponse
from src.api.flags.models import FeatureFlagModel


class FeatureFlagToggleRequest(BaseModel):
    active: bool


FeatureFlagListResponse = APIResponse[list[FeatureFlagModel]]
FeatureFlagResponse = APIResponse[FeatureFlagModel]
ActiveFlagsResponse = APIResponse[dict[str, bool]]
