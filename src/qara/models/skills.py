"""
Skill and routing models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import MatchKind, SkillKind


class Skill(BaseModel):
    """A registered skill and the trigger phrases that select it."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique skill identifier, e.g. 'research-deep'")
    name: str = Field(..., description="Human readable name")
    description: str = Field(default="")
    triggers: tuple[str, ...] = Field(..., min_length=1, description="Ordered trigger phrases")
    kind: SkillKind = Field(..., description="Handler family used for dispatch")
    target_function: str = Field(
        ..., description="Name of the structured LLM function backing the skill"
    )
    params: dict[str, Any] = Field(default_factory=dict, description="Static parameters")

    @property
    def category(self) -> str:
        """Category prefix of the id ('research' for 'research-deep')."""
        return self.id.split("-")[0]


class RouteMatch(BaseModel):
    """Result of routing one input string."""

    model_config = ConfigDict(frozen=True)

    skill: Skill
    confidence: float = Field(..., ge=0.0, le=1.0)
    tokens: tuple[str, ...]
    match_kind: MatchKind
