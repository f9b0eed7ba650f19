from pymongo.errors import PyMongoError

from bbbank_api.exceptions import AccountLookupError
from bbbank_api.models import Account


async def account_number_exists(account_number: str) -> bool:
    try:
        account = await Account.find_one({"account_number": account_number})
    except PyMongoError as e:
        raise AccountLookupError(account_number, str(e)) from e

    return account is not None
