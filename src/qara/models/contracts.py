"""
Pydantic models for the language-model client boundary.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    """Message roles for chat completion."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class LLMResponse(BaseModel):
    """Response from LLM completion."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: Any = Field(..., description="Response content (string or structured)")
    model: str = Field(..., description="Model that generated the response")
    input_tokens: int = Field(..., description="Input token count")
    output_tokens: int = Field(..., description="Output token count")
    latency_ms: float = Field(..., description="Request latency in milliseconds")
    finish_reason: str = Field(..., description="Completion finish reason")
    raw_response: Any | None = Field(None, description="Raw LiteLLM response object")
