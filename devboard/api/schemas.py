"""
Request and response schemas for the HTTP API.

Field aliases keep the camelCase wire format of the web client.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devboard.core.pipeline.state import PersonalInfo
from devboard.core.portfolio.prompts import PortfolioStyle

MAX_CONTENT_CHARS = 200_000


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PersonalInfoIn(_Request):
    field: Optional[str] = Field(None, max_length=500)
    experience: Optional[str] = Field(None, max_length=500)
    skills: Optional[str] = Field(None, max_length=2_000)
    interests: Optional[str] = Field(None, max_length=2_000)
    goals: Optional[str] = Field(None, max_length=2_000)

    def to_domain(self) -> PersonalInfo:
        return PersonalInfo(**self.model_dump())


class ReadmeGenerateRequest(_Request):
    username: str = Field(..., min_length=1, max_length=100)
    current_content: Optional[str] = Field(
        None, alias="currentContent", max_length=MAX_CONTENT_CHARS
    )
    is_new: bool = Field(..., alias="isNew")
    personal_info: Optional[PersonalInfoIn] = Field(None, alias="personalInfo")


class PortfolioGenerateRequest(_Request):
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_CHARS)
    custom_message: Optional[str] = Field(
        None, alias="customMessage", max_length=MAX_CONTENT_CHARS
    )
    style: PortfolioStyle = PortfolioStyle.minimal

    @field_validator("style", mode="before")
    @classmethod
    def _blank_style_is_default(cls, value):
        # the web client sends null or "" when no style was picked
        if value is None or value == "":
            return PortfolioStyle.minimal
        return value


class LLMGenerateRequest(_Request):
    prompt: str = Field(..., min_length=1, max_length=MAX_CONTENT_CHARS)
    system_prompt: Optional[str] = Field(
        None, alias="systemPrompt", max_length=MAX_CONTENT_CHARS
    )


class ProfileReadmeResponse(BaseModel):
    content: str
    sha: str
    html_url: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Human-readable error")
    details: Optional[str] = Field(None, description="Extra diagnostic detail")


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
