from datetime import datetime, timezone
from typing import Annotated, Optional
from beanie import Document, Indexed, Insert, Replace, SaveChanges, Update, before_event
from pydantic import Field


class BaseDocument(Document):
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @before_event(Insert)
    def set_created_at(self) -> None:
        self.created_at = datetime.now(timezone.utc)
        self.updated_at = datetime.now(timezone.utc)

    @before_event(Replace, SaveChanges, Update)
    def update_timestamp(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    class Settings:
        use_state_management = True


class Account(BaseDocument):
    account_number: Annotated[str, Indexed(unique=True)]
    title: Optional[str] = None

    class Settings:
        name = "accounts"
        use_state_management = True
        keep_nulls = False
