from enum import Enum


class OutcomeStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    PENDING = "pending"
    FAILED = "failed"


class ValidationErrorCode(str, Enum):
    ACCOUNT_NUMBER_EXISTS = "accountNumberExists"
    ACCOUNT_NUMBER_CHECK_FAILED = "accountNumberCheckFailed"
