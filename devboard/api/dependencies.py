"""
FastAPI dependency providers.

Collaborators (model client, GitHub client) are built once per process and
injected, so tests can swap them through ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header

from devboard.core.ports import LLMClientPort
from devboard.core.streaming import StreamPacing
from devboard.infra.auth.jwt_auth import JWTAuth
from devboard.infra.config.logging_config import bind_context, get_logger
from devboard.infra.config.settings import DUMMY_API_KEY, Settings, get_settings
from devboard.infra.github.client import GitHubClient
from devboard.infra.llm.langchain_client import LangChainClient
from devboard.infra.llm.mock_client import MockLLMClient


@lru_cache
def _shared_llm_client() -> LLMClientPort:
    settings = get_settings()
    logger = get_logger("infra.llm")
    # No real key configured: serve canned output instead of failing every call
    if settings.active_api_key() == DUMMY_API_KEY:
        logger.warning("llm.mock_client", provider=settings.llm_provider)
        return MockLLMClient()
    logger.info("llm.client", provider=settings.llm_provider)
    return LangChainClient.from_settings(settings)


@lru_cache
def _shared_github_client() -> GitHubClient:
    return GitHubClient.from_settings(get_settings())


async def close_clients() -> None:
    """Release pooled connections of clients created so far."""
    if _shared_github_client.cache_info().currsize:
        await _shared_github_client().aclose()
        _shared_github_client.cache_clear()


async def get_llm_client() -> LLMClientPort:
    """Dependency for LLM client."""
    return _shared_llm_client()


async def get_github_client() -> GitHubClient:
    return _shared_github_client()


async def get_stream_pacing(
    settings: Annotated[Settings, Depends(get_settings)],
) -> StreamPacing:
    return StreamPacing.from_settings(settings)


async def get_current_subject(
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> str:
    """Identity of the authenticated caller (GitHub username)."""
    logger = get_logger("auth")

    if settings.disable_auth:
        logger.debug("auth.disabled", subject=settings.dev_subject)
        subject = settings.dev_subject
    else:
        subject = JWTAuth(settings).subject_from_authorization(authorization)

    bind_context(subject=subject)
    return subject


# Type aliases for cleaner dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
LLMClientDep = Annotated[LLMClientPort, Depends(get_llm_client)]
GitHubClientDep = Annotated[GitHubClient, Depends(get_github_client)]
StreamPacingDep = Annotated[StreamPacing, Depends(get_stream_pacing)]
CurrentSubject = Annotated[str, Depends(get_current_subject)]
