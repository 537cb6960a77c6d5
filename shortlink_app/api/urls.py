from fastapi import APIRouter, Depends, Response, status

from shortlink_app.config import Settings
from shortlink_app.dependencies import get_settings, get_url_service
from shortlink_app.schemas.url import (
    ErrorResponse,
    MessageResponse,
    ShortenRequest,
    ShortenResponse,
    UpdateRequest,
)
from shortlink_app.services.url_service import ShortenerService

router = APIRouter(tags=["urls"])


def build_short_url(base_url: str, short_code: str) -> str:
    return f"{base_url.rstrip('/')}/{short_code}"


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def shorten_url(
    payload: ShortenRequest,
    url_service: ShortenerService = Depends(get_url_service),
    settings: Settings = Depends(get_settings),
):
    """Create a short URL, or return the existing one for this URL"""
    short_code = await url_service.create_short_url(payload.url)
    return ShortenResponse(
        short_url=build_short_url(settings.base_url, short_code),
        original_url=payload.url,
    )


@router.put(
    "/update/{short_code}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_url(
    short_code: str,
    payload: UpdateRequest,
    url_service: ShortenerService = Depends(get_url_service),
):
    """Point an existing short code at a new URL"""
    await url_service.update_long_url(short_code, payload.new_url)
    return MessageResponse(message="URL updated successfully")


@router.delete(
    "/delete/{short_code}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
async def delete_url(
    short_code: str,
    url_service: ShortenerService = Depends(get_url_service),
):
    """Delete a short URL"""
    await url_service.delete_mapping(short_code)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
