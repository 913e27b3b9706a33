"""
Pydantic models and enums shared across Qara components.
"""

from .enums import (
    ConfidenceLevel,
    EventStatus,
    EventType,
    Lane,
    LogLevel,
    MatchKind,
    OutputFormat,
    ResearchDepth,
    ResearchPhase,
    SkillKind,
    Verdict,
)
from .events import Event
from .research import (
    ClaimVerdict,
    DecompositionResult,
    FactCheckResponse,
    Finding,
    ResearchOptions,
    ResearchProgress,
    ResearchResult,
    Source,
    SubQuery,
    SynthesisResult,
    ValidationResult,
)
from .skills import RouteMatch, Skill

__all__ = [
    "Skill",
    "RouteMatch",
    "Event",
    "ValidationResult",
    "SubQuery",
    "DecompositionResult",
    "Source",
    "Finding",
    "ResearchResult",
    "ClaimVerdict",
    "FactCheckResponse",
    "SynthesisResult",
    "ResearchOptions",
    "ResearchProgress",
    "MatchKind",
    "SkillKind",
    "ResearchDepth",
    "OutputFormat",
    "ConfidenceLevel",
    "Verdict",
    "ResearchPhase",
    "EventType",
    "Lane",
    "EventStatus",
    "LogLevel",
]
