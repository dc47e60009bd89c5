"""API v1 routers"""

from fastapi import APIRouter

from .github import router as github_router
from .llm import router as llm_router
from .portfolio import router as portfolio_router
from .readme import router as readme_router

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(readme_router)
v1_router.include_router(portfolio_router)
v1_router.include_router(llm_router)
v1_router.include_router(github_router)
