from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from shortlink_app.schemas.url import ErrorResponse
from shortlink_app.services.url_service import ShortenerService
from shortlink_app.dependencies import get_url_service

router = APIRouter(tags=["redirect"])


@router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={404: {"model": ErrorResponse}},
)
async def redirect_to_long_url(
    short_code: str,
    url_service: ShortenerService = Depends(get_url_service),
):
    """
    Redirect to the original URL.

    Served from the redirect cache when possible; unknown codes raise
    NotFoundError, which the app turns into a 404.
    """
    long_url = await url_service.resolve(short_code)
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
