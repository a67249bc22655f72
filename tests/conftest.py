import os
import sys
from types import SimpleNamespace

import pytest
import pytest_asyncio
from tortoise import Tortoise

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest_asyncio.fixture(scope="function")
async def db() -> None:
    """Lightweight in-memory DB per test."""
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["aura.database.models"]},
        use_tz=True,
        timezone="UTC",
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def user(db):
    """Create a test user."""
    from aura.database.models import User

    user = await User.create(
        username="test_user",
        name="Test",
        country="Kenya",
        school="Alliance High",
    )
    return user


class FakeMessages:
    """Anthropic-shaped messages endpoint returning a canned answer."""

    def __init__(self, text: str):
        self.text = text
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(content=[SimpleNamespace(text=self.text)])


class FakeAnthropic:
    def __init__(self, text: str):
        self.messages = FakeMessages(text)


@pytest.fixture
def fake_classifier():
    """Factory: LessonClassifier backed by a canned LLM answer."""
    from aura.services.classifier import LessonClassifier

    def make(text: str) -> LessonClassifier:
        return LessonClassifier(provider="anthropic", client=FakeAnthropic(text))

    return make
