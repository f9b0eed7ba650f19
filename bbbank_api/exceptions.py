import logging
import traceback

from fastapi import Request, Response
from fastapi.responses import JSONResponse


logger = logging.getLogger("bbbank.api")


class AccountLookupError(Exception):
    def __init__(self, account_number: str, reason: str):
        self.account_number = account_number
        self.reason = reason
        super().__init__(f"Lookup of account number '{account_number}' failed: {reason}")


async def account_lookup_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)

    return JSONResponse(status_code=400, content={"detail": "Account lookup failed"})


async def exception_handler(request: Request, exc: Exception) -> Response:
    tb_lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
    filtered_lines = [line for line in tb_lines if "bbbank_api" in line]
    formatted_tb = "".join(filtered_lines) or tb_lines[-1]

    logger.error(
        "Unhandled error on %s %s: %s\nShort traceback:\n%s",
        request.method,
        request.url.path,
        exc,
        formatted_tb,
    )

    return Response(status_code=500)
