import logging
from typing import Any, Dict, Union
from fastapi import APIRouter, Depends, Request, Response

from bbbank_api.dependencies import AccountLookup, get_account_lookup
from bbbank_api.limiter import limiter
from bbbank_api.settings import settings


logger = logging.getLogger("bbbank.api")

router = APIRouter(prefix="/account", tags=["account"])

common_responses: Dict[Union[int, str], Dict[str, Any]] = {
    400: {
        "description": "Account lookup failed",
        "content": {
            "application/json": {"example": {"detail": "Account lookup failed"}}
        },
    },
    429: {
        "description": "Too many requests",
        "content": {
            "application/json": {
                "example": {"error": "Rate limit exceeded: 60 per 1 minute"}
            }
        },
    },
}


@router.get(
    "/AccountNumberExists/{account_number}",
    response_model=bool,
    responses=common_responses,
)
@limiter.limit(settings.ACCOUNT_RATE_LIMIT)
async def account_number_exists(
    account_number: str,
    request: Request,
    response: Response,
    lookup: AccountLookup = Depends(get_account_lookup),
) -> bool:
    exists = await lookup(account_number)
    logger.debug("Account number '%s' exists: %s", account_number, exists)

    return exists
