"""
GitHub profile data for the authenticated caller.
"""

from fastapi import APIRouter, HTTPException, status

from devboard.api.dependencies import CurrentSubject, GitHubClientDep
from devboard.api.schemas import ProfileReadmeResponse
from devboard.infra.config.logging_config import get_logger
from devboard.infra.github.client import GitHubError

router = APIRouter(prefix="/github", tags=["github"])
log = get_logger("api.github")


@router.get("/readme", response_model=ProfileReadmeResponse)
async def get_profile_readme(
    subject: CurrentSubject,
    github: GitHubClientDep,
) -> ProfileReadmeResponse:
    """Current profile README of the caller, used as ``currentContent`` when editing."""
    try:
        readme = await github.fetch_profile_readme(subject)
    except GitHubError as exc:
        log.warning("github.readme.failed", username=subject, status_code=exc.status_code)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch README from GitHub",
        ) from exc

    if readme is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="README not found")

    return ProfileReadmeResponse(content=readme.content, sha=readme.sha, html_url=readme.html_url)
