"""
Pytest configuration and shared fixtures.
"""

import asyncio
import tempfile
from pathlib import Path

import pytest
from qara.core.config import QaraConfig, reset_config
from qara.models.enums import ConfidenceLevel, EventType, Lane, Verdict
from qara.models.research import (
    ClaimVerdict,
    DecompositionResult,
    FactCheckResponse,
    Finding,
    ResearchResult,
    Source,
    SubQuery,
    SynthesisResult,
    ValidationResult,
)
from qara.observability.emitter import EventEmitter
from qara.observability.listeners import EventCollector
from qara.runtime import create_runtime
from qara.skills.research.orchestrator import ResearchOrchestrator


def default_decomposition() -> DecompositionResult:
    """Buckets deliberately out of priority order."""
    return DecompositionResult(
        primary_queries=[
            SubQuery(query="history of X", focus="history", boundary="no current events", priority=2),
            SubQuery(query="current state of X", focus="current state", boundary="no history", priority=1),
        ],
        validation_queries=[
            SubQuery(query="evidence for X", focus="evidence", boundary="no opinion", priority=1),
        ],
        edge_queries=[
            SubQuery(query="risks of X", focus="risks", boundary="no benefits", priority=3),
        ],
    )


def default_findings(focus: str) -> list[Finding]:
    return [
        Finding(claim=f"{focus}: established fact", confidence=ConfidenceLevel.HIGH),
        Finding(claim=f"{focus}: likely fact", confidence=ConfidenceLevel.MEDIUM),
        Finding(claim=f"{focus}: weak fact", confidence=ConfidenceLevel.LOW),
    ]


class FakeResearchFunctions:
    """
    In-memory stand-in for the language-model boundary.

    Records every call, can fail selected functions or sub-query focuses,
    and emits llm.request/llm.response around each call when given an
    emitter so event parentage can be checked.
    """

    def __init__(
        self,
        emitter: EventEmitter | None = None,
        decomposition: DecompositionResult | None = None,
        findings_per_query: int | None = None,
        fail_on: tuple[str, ...] = (),
        failing_focuses: tuple[str, ...] = (),
        delays: dict[str, float] | None = None,
    ):
        self.emitter = emitter
        self.decomposition = decomposition or default_decomposition()
        self.findings_per_query = findings_per_query
        self.fail_on = set(fail_on)
        self.failing_focuses = set(failing_focuses)
        self.delays = delays or {}
        self.calls: list[tuple[str, dict]] = []

    def calls_to(self, name: str) -> list[dict]:
        return [kwargs for called, kwargs in self.calls if called == name]

    async def _enter(self, name: str, **kwargs) -> None:
        self.calls.append((name, kwargs))
        if self.emitter is not None:
            self.emitter.emit(EventType.LLM_REQUEST, Lane.LLM, {"function": name, **kwargs})
        await asyncio.sleep(self.delays.get(kwargs.get("focus", name), 0))
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    def _exit(self, name: str, **kwargs) -> None:
        if self.emitter is not None:
            self.emitter.emit(
                EventType.LLM_RESPONSE, Lane.LLM, {"function": name, "success": True, **kwargs}
            )

    async def validate_research_scope(self, query: str) -> ValidationResult:
        await self._enter("validate_research_scope", query=query)
        self._exit("validate_research_scope")
        return ValidationResult(
            is_clear=True,
            topics=[query],
            relationship="single",
            time_period="current",
            primary_sources=["journals"],
            recommended_structure="standard",
        )

    async def decompose_query(
        self, query: str, depth: int, validation: ValidationResult
    ) -> DecompositionResult:
        await self._enter("decompose_query", query=query, depth=depth, validation=validation)
        self._exit("decompose_query")
        return self.decomposition

    async def research_topic(
        self, query: str, focus: str, boundary: str, depth: int
    ) -> ResearchResult:
        await self._enter("research_topic", query=query, focus=focus, boundary=boundary, depth=depth)
        if focus in self.failing_focuses:
            raise RuntimeError(f"research failed for {focus}")
        self._exit("research_topic", focus=focus)

        findings = default_findings(focus)
        if self.findings_per_query is not None:
            findings = [
                Finding(claim=f"{focus}: claim {i}", confidence=ConfidenceLevel.LOW)
                for i in range(self.findings_per_query)
            ]
        return ResearchResult(
            query=query,
            focus=focus,
            summary=f"Summary of {focus}",
            key_findings=findings,
            sources=[Source(title=f"{focus} source", url=f"https://example.com/{focus}")],
            gaps=[],
        )

    async def fact_check_claims(self, claims: list[str], context: str) -> FactCheckResponse:
        await self._enter("fact_check_claims", claims=claims, context=context)
        self._exit("fact_check_claims")
        verdicts = [Verdict.VERIFIED, Verdict.DISPUTED, Verdict.UNVERIFIABLE, Verdict.PARTIALLY_VERIFIED]
        return FactCheckResponse(
            results=[
                ClaimVerdict(claim=claim, verdict=verdicts[i % len(verdicts)])
                for i, claim in enumerate(claims)
            ]
        )

    async def synthesize_findings(
        self, original_query, research_results, fact_check, output_format
    ) -> SynthesisResult:
        await self._enter(
            "synthesize_findings",
            original_query=original_query,
            research_results=research_results,
            fact_check=fact_check,
            output_format=output_format,
        )
        self._exit("synthesize_findings")
        return SynthesisResult(
            executive_brief=f"Brief on {original_query} from {len(research_results)} streams",
            detailed_analysis="Detailed analysis",
            source_appendix="Sources",
        )

    async def write_blog(self, query: str, **params) -> str:
        await self._enter("write_blog", query=query, **params)
        return f"# Blog: {query}"

    async def generate_code(self, query: str, **params) -> str:
        await self._enter("generate_code", query=query, **params)
        return f"def solution():  # {query}\n    pass"


@pytest.fixture(autouse=True)
def _reset_config():
    """Never leak a cached CLI configuration between tests"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def temp_dir():
    """Temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def emitter():
    return EventEmitter()


@pytest.fixture
def collector(emitter):
    """Collector subscribed to the shared emitter"""
    collector = EventCollector()
    emitter.subscribe(collector)
    return collector


@pytest.fixture
def fake_functions(emitter):
    return FakeResearchFunctions(emitter=emitter)


@pytest.fixture
def orchestrator(fake_functions, emitter):
    return ResearchOrchestrator(fake_functions, emitter=emitter)


@pytest.fixture
def config():
    return QaraConfig(model="openai/gpt-4o-mini", events_enabled=True)


@pytest.fixture
def runtime(config, fake_functions, emitter):
    return create_runtime(config, functions=fake_functions, emitter=emitter)


@pytest.fixture
def make_orchestrator(emitter):
    """Factory for an orchestrator over a customised fake"""

    def factory(**fake_kwargs):
        functions = FakeResearchFunctions(emitter=emitter, **fake_kwargs)
        return ResearchOrchestrator(functions, emitter=emitter), functions

    return factory
