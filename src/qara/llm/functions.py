"""
Structured language-model functions used by skills.

``ResearchFunctions`` and ``GenerativeFunctions`` describe the boundary the
orchestrator and runtime call through. ``LiteLLMFunctions`` implements both
on top of ``LLMClient``; tests substitute their own implementations.
"""

import json
from typing import Any, Protocol

from pydantic import BaseModel, Field

from ..models.contracts import MessageRole
from ..models.enums import OutputFormat
from ..models.research import (
    DecompositionResult,
    FactCheckResponse,
    ResearchResult,
    SynthesisResult,
    ValidationResult,
)
from .client import LLMClient


class ResearchFunctions(Protocol):
    """One awaitable call per research phase."""

    async def validate_research_scope(self, query: str) -> ValidationResult: ...

    async def decompose_query(
        self, query: str, depth: int, validation: ValidationResult
    ) -> DecompositionResult: ...

    async def research_topic(
        self, query: str, focus: str, boundary: str, depth: int
    ) -> ResearchResult: ...

    async def fact_check_claims(self, claims: list[str], context: str) -> FactCheckResponse: ...

    async def synthesize_findings(
        self,
        original_query: str,
        research_results: list[ResearchResult],
        fact_check: FactCheckResponse | None,
        output_format: OutputFormat,
    ) -> SynthesisResult: ...


class GenerativeFunctions(Protocol):
    """Single-call skills."""

    async def write_blog(self, query: str, **params: Any) -> str: ...

    async def generate_code(self, query: str, **params: Any) -> str: ...


class _TextOutput(BaseModel):
    text: str = Field(..., description="Markdown formatted output")


_SYSTEM_PROMPTS = {
    "ValidateResearchScope": (
        "You scope research requests. Identify the distinct topics, how they relate, "
        "the time period, likely primary sources, and whether clarification is needed."
    ),
    "DecomposeQuery": (
        "You split a research request into primary, validation and edge-case sub-queries. "
        "Give every sub-query a boundary naming what it must NOT cover so parallel "
        "researchers do not overlap. Priority 1 is most important. Depth 1 means 2-3 "
        "sub-queries in total; each extra depth level adds breadth."
    ),
    "ResearchTopic": (
        "You research one focused sub-question. Stay inside the given boundary. "
        "Report key findings with a confidence level (HIGH, MEDIUM, LOW, UNVERIFIED) "
        "and cite sources."
    ),
    "FactCheckClaims": (
        "You fact-check claims. For each claim return VERIFIED, PARTIALLY_VERIFIED, "
        "DISPUTED or UNVERIFIABLE with a short explanation and sources."
    ),
    "SynthesizeFindings": (
        "You synthesize research into an executive brief, a detailed analysis and a "
        "source appendix. Weigh fact-check verdicts when present."
    ),
    "WriteBlog": "You write well structured blog posts in Markdown.",
    "GenerateCode": "You write correct, idiomatic code with brief explanations.",
}


def _payload(obj: Any) -> str:
    if isinstance(obj, BaseModel):
        return obj.model_dump_json(indent=2)
    return json.dumps(obj, indent=2, default=_dump_default)


def _dump_default(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    return str(obj)


class LiteLLMFunctions:
    """
    Structured skill functions backed by LiteLLM.

    Example:
        functions = LiteLLMFunctions(LLMClient(default_model="openai/gpt-4o-mini"))
        validation = await functions.validate_research_scope("AI safety")
    """

    def __init__(self, client: LLMClient):
        self.client = client

    async def _call(self, function_name: str, inputs: dict[str, Any], schema: type[BaseModel]):
        messages = [
            {"role": MessageRole.SYSTEM.value, "content": _SYSTEM_PROMPTS[function_name]},
            {"role": MessageRole.USER.value, "content": _payload(inputs)},
        ]
        response = await self.client.acomplete(
            messages=messages,
            response_schema=schema,
            function_name=function_name,
        )
        return response.content

    async def validate_research_scope(self, query: str) -> ValidationResult:
        return await self._call("ValidateResearchScope", {"query": query}, ValidationResult)

    async def decompose_query(
        self, query: str, depth: int, validation: ValidationResult
    ) -> DecompositionResult:
        return await self._call(
            "DecomposeQuery",
            {"query": query, "depth": depth, "validation": validation},
            DecompositionResult,
        )

    async def research_topic(
        self, query: str, focus: str, boundary: str, depth: int
    ) -> ResearchResult:
        return await self._call(
            "ResearchTopic",
            {"query": query, "focus": focus, "boundary": boundary, "depth": depth},
            ResearchResult,
        )

    async def fact_check_claims(self, claims: list[str], context: str) -> FactCheckResponse:
        return await self._call(
            "FactCheckClaims", {"claims": claims, "context": context}, FactCheckResponse
        )

    async def synthesize_findings(
        self,
        original_query: str,
        research_results: list[ResearchResult],
        fact_check: FactCheckResponse | None,
        output_format: OutputFormat,
    ) -> SynthesisResult:
        return await self._call(
            "SynthesizeFindings",
            {
                "original_query": original_query,
                "research_results": research_results,
                "fact_check": fact_check,
                "output_format": output_format.value,
            },
            SynthesisResult,
        )

    async def write_blog(self, query: str, **params: Any) -> str:
        output = await self._call("WriteBlog", {"topic": query, **params}, _TextOutput)
        return output.text

    async def generate_code(self, query: str, **params: Any) -> str:
        output = await self._call("GenerateCode", {"specification": query, **params}, _TextOutput)
        return output.text
