import os

import pytest

os.environ.setdefault("DATABASE_URL", "mongodb://localhost:27017")
os.environ["RATE_LIMIT_ENABLED"] = "false"

from fakes import FakeExistenceCheck  # noqa: E402


@pytest.fixture
def existence_check() -> FakeExistenceCheck:
    return FakeExistenceCheck(taken={"999", "123"})
