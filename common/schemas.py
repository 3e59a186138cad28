"""Pydantic schemas for webhook response bodies."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


class RateLimitSignal(BaseModel):
    """Body of an HTTP 429 response."""
    model_config = ConfigDict(populate_by_name=True)

    message: StrictStr
    retry_after: StrictInt = Field(ge=0)
    is_global: StrictBool = Field(alias="global")
    code: StrictInt
