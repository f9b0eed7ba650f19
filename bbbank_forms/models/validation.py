from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict

from bbbank_forms.enums import OutcomeStatus, ValidationErrorCode


class ValidationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    sequence: int


class ValidationOutcome(BaseModel):
    """Result of validating one account number value.

    ``PENDING`` is emitted while a value waits for its debounce window or its
    existence check. The other statuses are terminal.
    """

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    reason: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def valid(cls) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.VALID)

    @classmethod
    def invalid(
        cls, reason: str = ValidationErrorCode.ACCOUNT_NUMBER_EXISTS.value
    ) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.INVALID, reason=reason)

    @classmethod
    def pending(cls) -> "ValidationOutcome":
        return cls(status=OutcomeStatus.PENDING)

    @classmethod
    def failed(cls, error: str) -> "ValidationOutcome":
        return cls(
            status=OutcomeStatus.FAILED,
            reason=ValidationErrorCode.ACCOUNT_NUMBER_CHECK_FAILED.value,
            error=error,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status != OutcomeStatus.PENDING

    def to_errors(self) -> Optional[Dict[str, bool]]:
        if self.status in (OutcomeStatus.VALID, OutcomeStatus.PENDING):
            return None

        return {self.reason or ValidationErrorCode.ACCOUNT_NUMBER_CHECK_FAILED.value: True}
