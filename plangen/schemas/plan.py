"""Pydantic schemas for plan generation, sharing and storage."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GeneratePlanRequest(BaseModel):
    """Request body for plan generation."""

    idea: str = Field(
        ...,
        min_length=1,
        description="Project idea to turn into a plan (20-1000 characters).",
    )
    template: Literal["next", "vercel-ai"] = Field(
        default="next",
        description="Scaffolding template the plan targets.",
    )


class SharedPlanResponse(BaseModel):
    """Token-based sharing links for a plan."""

    token: str = Field(..., description="URL-safe compressed encoding of the plan.")
    share_url: str = Field(..., description="Web link embedding the token.")
    raw_url: str = Field(..., description="URL serving the raw Markdown (used by the CLI).")
    cli_command: str = Field(..., description="Command that scaffolds a project from this plan.")


class GeneratePlanResponse(SharedPlanResponse):
    """Generated plan plus its sharing links."""

    plan: str = Field(..., description="Generated Markdown plan.")


class ValidateIdeaRequest(BaseModel):
    idea: str = Field(..., description="Project idea to check.")


class ValidateIdeaResponse(BaseModel):
    """Result of idea validation with tips for improving the idea."""

    valid: bool
    error: str | None = None
    suggestions: list[str] = Field(default_factory=list)


class EncodePlanRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Plan Markdown to encode.")
    template: Literal["next", "vercel-ai"] = Field(default="next")


class StorePlanRequest(BaseModel):
    content: str = Field(..., description="Plan Markdown to store (100-50000 characters).")


class StorePlanResponse(BaseModel):
    """Short id allocated for a stored plan."""

    id: str = Field(..., description="8-character alphanumeric plan id.")
    share_url: str = Field(..., description="Short web link for the plan.")
    remaining_requests: int = Field(
        ...,
        description="Storage requests left in the current rate limit window.",
    )


class PlanContentResponse(BaseModel):
    content: str
