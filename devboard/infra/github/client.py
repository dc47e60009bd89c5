"""
GitHub REST API access for profile README data.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Optional

import httpx

from devboard.infra.config.logging_config import get_logger
from devboard.infra.config.settings import Settings


class GitHubError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class ProfileReadme:
    content: str
    sha: str
    html_url: Optional[str] = None


def decode_content(encoded: str) -> str:
    """Decode GitHub's line-wrapped base64 file content."""
    try:
        return base64.b64decode(encoded.replace("\n", "")).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise GitHubError(f"Undecodable README content: {exc}") from exc


class GitHubClient:
    """Thin async client over the GitHub REST API."""

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url, headers=headers, timeout=timeout, transport=transport
        )
        self._log = get_logger("infra.github")

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubClient":
        return cls(base_url=settings.github_api_url, token=settings.github_token)

    async def fetch_profile_readme(self, username: str) -> Optional[ProfileReadme]:
        """README of the ``<username>/<username>`` profile repository, or None."""
        try:
            response = await self._client.get(f"/repos/{username}/{username}/readme")
        except httpx.HTTPError as exc:
            self._log.warning("github.readme.request_failed", username=username, error=str(exc))
            raise GitHubError(f"GitHub request failed: {exc}") from exc

        if response.status_code == 404:
            self._log.info("github.readme.not_found", username=username)
            return None
        if response.status_code >= 400:
            raise GitHubError(
                f"GitHub responded with {response.status_code}", response.status_code
            )

        data = response.json()
        return ProfileReadme(
            content=decode_content(data.get("content", "")),
            sha=data.get("sha", ""),
            html_url=data.get("html_url"),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
