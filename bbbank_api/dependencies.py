from typing import Awaitable, Callable

from bbbank_api.services.accounts import account_number_exists

AccountLookup = Callable[[str], Awaitable[bool]]


def get_account_lookup() -> AccountLookup:
    return account_number_exists
