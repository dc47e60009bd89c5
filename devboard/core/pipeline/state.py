"""State records threaded through one pipeline run."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PipelineState(BaseModel):
    """Bookkeeping shared by every pipeline.

    ``error`` is the routing sentinel: once a step sets it no further step
    runs and nothing clears it.
    """

    model_config = ConfigDict(extra="forbid")

    error: Optional[str] = None
    current_step: Optional[str] = None
    progress: int = Field(0, ge=0, le=100)
    cancelled: bool = False


class PersonalInfo(BaseModel):
    """Free-text personalization attributes, each optional."""

    field: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[str] = None
    interests: Optional[str] = None
    goals: Optional[str] = None


class ReadmeState(PipelineState):
    username: str = Field(..., min_length=1)
    current_content: Optional[str] = None
    is_new: bool = True
    personal_info: Optional[PersonalInfo] = None

    # step outputs
    analysis: Optional[str] = None
    generated_content: Optional[str] = None
    final_content: Optional[str] = None

    @classmethod
    def start(
        cls,
        username: str,
        current_content: Optional[str] = None,
        is_new: bool = True,
        personal_info: Optional[PersonalInfo] = None,
    ) -> "ReadmeState":
        # Editing without existing content is a fresh README
        has_content = bool(current_content and current_content.strip())
        return cls(
            username=username,
            current_content=current_content if has_content else None,
            is_new=is_new or not has_content,
            personal_info=personal_info,
        )


class PortfolioState(PipelineState):
    content: str = Field(..., min_length=1)
    custom_message: str = ""
    style: str = "minimal"
    current_step: Optional[str] = "parsing"

    # step outputs
    parsed_data: Optional[str] = None
    portfolio_code: Optional[str] = None
