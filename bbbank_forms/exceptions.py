from typing import Optional


class FormsError(Exception):
    pass


class ExistenceCheckError(FormsError):
    def __init__(self, account_number: str, reason: str, status_code: Optional[int] = None):
        self.account_number = account_number
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Existence check for '{account_number}' failed: {reason}")
