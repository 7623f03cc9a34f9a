from fastapi import APIRouter, Depends, status, BackgroundTasks, Request
from fastapi.responses import RedirectResponse
import logging

from linkshort.schemas.ShortURLResponse import ShortURLResponse
from linkshort.schemas.URLCreateRequest import URLCreateRequest
from linkshort.services.resolver import RedirectResolver
from linkshort.services.shortener import URLService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_url_service(request: Request) -> URLService:
    return request.app.state.url_service


def get_resolver(request: Request) -> RedirectResolver:
    return request.app.state.resolver


@router.post("/", response_model=ShortURLResponse, status_code=status.HTTP_201_CREATED, tags=["shorten"])
def shorten_url_endpoint(url_request: URLCreateRequest, service: URLService = Depends(get_url_service)):
    code = service.shorten(url_request.url)
    logger.info(f"API success: Shortened {str(url_request.url)[:50]}... to {code}")
    return ShortURLResponse(
        short_url=service.short_url_for(code),
        code=code,
        long_url=url_request.url,
    )


@router.get("/{code}", tags=["redirect"])
def redirect_to_url_endpoint(
    code: str,
    request: Request,
    background_tasks: BackgroundTasks,
    resolver: RedirectResolver = Depends(get_resolver),
):
    long_url = resolver.resolve(code)
    if request.app.state.settings.TRACK_HITS:
        background_tasks.add_task(resolver.record_hit, code)
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
