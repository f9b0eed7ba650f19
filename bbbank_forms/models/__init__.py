from .validation import ValidationOutcome, ValidationRequest


__all__ = [
    "ValidationOutcome",
    "ValidationRequest",
]
