from urllib.parse import urljoin
from fastapi import APIRouter, Request, Response

from bbbank_api.settings import settings
from bbbank_api.models.common_responses import DetailResponse, InfoResponse
from bbbank_api.routes import accounts
from bbbank_api.limiter import limiter


router = APIRouter(prefix="/api")


@router.get("", response_model=InfoResponse, tags=["root"])
@limiter.limit("10/minute")
def info(request: Request, response: Response) -> InfoResponse:
    return InfoResponse(
        title=settings.APP_TITLE,
        version=settings.APP_VERSION,
        docs_url=urljoin(str(settings.API_URL), "/docs"),
    )


@router.get("/health", response_model=DetailResponse, tags=["root"])
@limiter.limit("10/minute")
def health_check(request: Request, response: Response) -> DetailResponse:
    return DetailResponse(detail="ok")


router.include_router(accounts.router)
