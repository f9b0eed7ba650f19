import logging
from types import TracebackType
from typing import Optional, Type
from urllib.parse import quote, urljoin
import httpx

from bbbank_forms.exceptions import ExistenceCheckError
from bbbank_forms.settings import settings


logger = logging.getLogger("bbbank.forms")


class AccountClient:
    """
    Client for the account endpoints of the BBBank API.

    Parameters:
    - base_url (str): API base URL ending with a slash, e.g. ``http://localhost:8000/api/``.
    - timeout (float): Request timeout in seconds.
    - http_client (httpx.AsyncClient): Optional shared client. A client passed in
      is left open by ``aclose``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url or str(settings.API_URL_BASE)
        if not self.base_url.endswith("/"):
            self.base_url += "/"

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT
        )

    def account_number_exists_url(self, account_number: str) -> str:
        return urljoin(
            self.base_url,
            "account/AccountNumberExists/" + quote(account_number, safe=""),
        )

    async def account_number_exists(self, account_number: str) -> bool:
        url = self.account_number_exists_url(account_number)

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExistenceCheckError(
                account_number,
                f"server answered {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ExistenceCheckError(account_number, str(e) or type(e).__name__) from e

        try:
            exists = response.json()
        except ValueError as e:
            raise ExistenceCheckError(account_number, "response is not JSON") from e

        if not isinstance(exists, bool):
            raise ExistenceCheckError(
                account_number, f"expected a boolean body, got {exists!r}"
            )

        logger.debug("Account number '%s' exists: %s", account_number, exists)

        return exists

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AccountClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
