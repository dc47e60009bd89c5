"""Global test configuration and fixtures."""

import os
from typing import AsyncGenerator, Dict

import httpx
import pytest
import pytest_asyncio

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["DISABLE_AUTH"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["LLM_PROVIDER"] = "openai"
os.environ["OPENAI_API_KEY"] = "dummy-key-for-test"
os.environ["PROMETHEUS_METRICS_ENABLED"] = "true"

from devboard.api.dependencies import get_llm_client, get_stream_pacing
from devboard.core.streaming import StreamPacing
from devboard.infra.auth.jwt_auth import JWTAuth
from devboard.main import create_app
from tests._helpers.fakes import FakeLLMClient


# Authentication fixtures
@pytest.fixture
def test_username() -> str:
    return "octocat"


@pytest.fixture
def jwt_token(test_username: str) -> str:
    """Valid JWT token for testing."""
    return JWTAuth().create_access_token(test_username, expires_minutes=60)


@pytest.fixture
def auth_headers(jwt_token: str) -> Dict[str, str]:
    """Authorization headers for API requests."""
    return {"Authorization": f"Bearer {jwt_token}"}


# LLM fixtures
@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


# Application fixtures
@pytest.fixture
def app(fake_llm: FakeLLMClient):
    application = create_app()
    application.dependency_overrides[get_llm_client] = lambda: fake_llm
    application.dependency_overrides[get_stream_pacing] = lambda: StreamPacing(
        chunk_size=10, delay=0
    )
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
