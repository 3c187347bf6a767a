import os
import tempfile

# Point the app at a throwaway database before learnmate is imported
_DB_DIR = tempfile.mkdtemp(prefix="learnmate-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"

import pytest
from fastapi.testclient import TestClient

from learnmate.main import app
from learnmate.providers import BaseProvider, ProviderError, get_provider


class FakeProvider(BaseProvider):
    """Provider returning a canned reply and recording what it was asked."""

    name = "fake"

    def __init__(self, reply: str = "", error: bool = False):
        super().__init__(api_key="test-key", model="fake-model")
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate(self, prompt, config=None):
        self.calls.append((prompt, config))
        if self.error:
            raise ProviderError(self.name, "HTTP 403")
        return self.reply


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def use_provider():
    """Install a FakeProvider with the given reply as the app's provider and return it."""

    def install(reply: str = "", error: bool = False):
        provider = FakeProvider(reply=reply, error=error)
        app.dependency_overrides[get_provider] = lambda: provider
        return provider

    return install
