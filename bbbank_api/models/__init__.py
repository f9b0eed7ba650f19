from .database import Account, BaseDocument
from .common_responses import DetailResponse, InfoResponse


__all__ = [
    "Account",
    "BaseDocument",
    "DetailResponse",
    "InfoResponse",
]
