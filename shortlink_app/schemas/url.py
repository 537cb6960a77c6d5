from pydantic import BaseModel, ConfigDict, Field


class ShortenRequest(BaseModel):
    # Plain str: validation (and its 400 response) belongs to the service
    url: str = Field(..., description="The original URL to be shortened")

    model_config = ConfigDict(
        json_schema_extra={"example": {"url": "https://example.com/some/long/path"}}
    )


class ShortenResponse(BaseModel):
    short_url: str
    original_url: str


class UpdateRequest(BaseModel):
    new_url: str = Field(..., description="The URL the short code should point to")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
