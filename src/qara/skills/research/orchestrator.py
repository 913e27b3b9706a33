"""
Research Orchestrator

Coordinates the multi-phase research workflow:
1. Validate scope (skippable)
2. Decompose query into bounded sub-queries
3. Research every sub-query concurrently (fail-soft)
4. Fact-check low-confidence claims (skipped at depth 1)
5. Synthesize a tiered report

Both ``execute`` and ``stream`` consume the same phase generator, so the
blocking and streaming entry points cannot drift apart.
"""

import asyncio
import time
import traceback
import uuid
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractContextManager

from ...exceptions import QaraError
from ...llm.functions import ResearchFunctions
from ...models.enums import (
    ConfidenceLevel,
    EventStatus,
    EventType,
    Lane,
    ResearchDepth,
    ResearchPhase,
)
from ...models.research import (
    DecompositionResult,
    FactCheckResponse,
    ResearchOptions,
    ResearchProgress,
    ResearchResult,
    SubQuery,
    SynthesisResult,
    ValidationResult,
)
from ...observability.emitter import EventEmitter
from ...utils.logging import get_logger

logger = get_logger(__name__)

MAX_FACT_CHECK_CLAIMS = 10

PHASE_PROGRESS = {
    ResearchPhase.VALIDATE: 0.1,
    ResearchPhase.DECOMPOSE: 0.2,
    ResearchPhase.RESEARCH: 0.4,
    ResearchPhase.FACTCHECK: 0.7,
    ResearchPhase.SYNTHESIZE: 0.85,
    ResearchPhase.COMPLETE: 1.0,
}

ProgressCallback = Callable[[ResearchProgress], None]


class ResearchOrchestrator:
    """
    Runs one research query through the five phases.

    Example:
        orchestrator = ResearchOrchestrator(LiteLLMFunctions(client), emitter)
        report = await orchestrator.execute("AI safety", ResearchOptions(depth=3))

        async for progress in orchestrator.stream("AI safety"):
            print(progress.phase, progress.progress, progress.message)
    """

    def __init__(self, functions: ResearchFunctions, emitter: EventEmitter | None = None):
        self.functions = functions
        self.emitter = emitter if emitter is not None else EventEmitter()

    async def execute(
        self,
        query: str,
        options: ResearchOptions | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> SynthesisResult:
        """
        Run the pipeline to completion.

        Args:
            query: Research question
            options: Depth, output format and skip flags
            on_progress: Called with every progress notification

        Returns:
            The synthesized report

        Raises:
            Any exception raised by phases 1, 2, 4 or 5, unchanged
        """
        result: SynthesisResult | None = None
        async for progress in self._run(query, options or ResearchOptions()):
            if on_progress is not None:
                on_progress(progress)
            if progress.result is not None:
                result = progress.result

        if result is not None:
            return result
        raise QaraError("Research pipeline finished without a result", details={"query": query})

    def stream(
        self, query: str, options: ResearchOptions | None = None
    ) -> AsyncIterator[ResearchProgress]:
        """
        Run the pipeline as a lazy sequence of progress notifications.

        The last notification has phase ``complete`` and carries the result.
        A stream cannot be resumed; start a new one instead.
        """
        return self._run(query, options or ResearchOptions())

    async def _run(self, query: str, options: ResearchOptions) -> AsyncIterator[ResearchProgress]:
        start_time = time.perf_counter()
        depth = ResearchDepth(options.depth)
        skill_id = f"research-{uuid.uuid4().hex[:8]}"
        log = logger.bind(skill_id=skill_id)

        run_id = self.emitter.emit(
            EventType.SKILL_START,
            Lane.ORCHESTRATOR,
            {
                "skill_id": skill_id,
                "skill_name": f"{depth.label} research",
                "input": query,
                "params": {"depth": int(depth), "output_format": options.output_format.value},
            },
        )
        log.info("research_started", depth=depth.label, query=query)

        try:
            # Phase 1: Validation
            if options.skip_validation:
                validation = ValidationResult.single_topic(query)
            else:
                message = "Validating scope..."
                yield self._progress(ResearchPhase.VALIDATE, message)
                with self._phase(skill_id, run_id, ResearchPhase.VALIDATE, message):
                    validation = await self.functions.validate_research_scope(query)
                    self.emitter.emit(
                        EventType.RESEARCH_VALIDATE,
                        Lane.RESEARCH,
                        {
                            "query": query,
                            "is_clear": validation.is_clear,
                            "topics": validation.topics,
                            "clarification_needed": validation.clarification_needed,
                        },
                    )
                if validation.clarification_needed:
                    log.info(
                        "clarification_needed",
                        questions=validation.clarification_needed,
                    )

            # Phase 2: Decomposition
            message = "Decomposing query..."
            yield self._progress(ResearchPhase.DECOMPOSE, message)
            with self._phase(skill_id, run_id, ResearchPhase.DECOMPOSE, message):
                decomposition = await self.functions.decompose_query(
                    query=query, depth=int(depth), validation=validation
                )
                ordered = self.order_sub_queries(decomposition)
                self.emitter.emit(
                    EventType.RESEARCH_DECOMPOSE,
                    Lane.RESEARCH,
                    {
                        "query_count": decomposition.query_count,
                        "queries": [
                            {"id": query_id, "focus": q.focus, "priority": q.priority}
                            for query_id, q in ordered
                        ],
                    },
                )
            log.info("query_decomposed", sub_queries=decomposition.query_count)

            # Phase 3: Parallel research
            message = f"Executing {len(ordered)} research streams in parallel..."
            yield self._progress(ResearchPhase.RESEARCH, message)
            with self._phase(skill_id, run_id, ResearchPhase.RESEARCH, message):
                results = await self._execute_parallel(ordered, depth, log)
            log.info("research_streams_completed", succeeded=len(results), total=len(ordered))

            # Phase 4: Fact-checking (never at quick depth)
            fact_check: FactCheckResponse | None = None
            if not options.skip_fact_check and depth > ResearchDepth.QUICK:
                message = "Fact-checking claims..."
                yield self._progress(ResearchPhase.FACTCHECK, message)
                with self._phase(skill_id, run_id, ResearchPhase.FACTCHECK, message):
                    claims = self.extract_claims(results)
                    if claims:
                        fact_check = await self.functions.fact_check_claims(
                            claims=claims, context=query
                        )
                        self.emitter.emit(
                            EventType.RESEARCH_FACTCHECK,
                            Lane.RESEARCH,
                            {
                                "claims_checked": len(claims),
                                "verified": fact_check.verified_count,
                                "flagged": fact_check.flagged_count,
                            },
                        )
                if fact_check is not None:
                    log.info("claims_fact_checked", verdicts=len(fact_check.results))
                else:
                    log.info("fact_check_skipped", reason="no_low_confidence_claims")

            # Phase 5: Synthesis
            message = "Synthesizing results..."
            yield self._progress(ResearchPhase.SYNTHESIZE, message)
            with self._phase(skill_id, run_id, ResearchPhase.SYNTHESIZE, message):
                synthesis = await self.functions.synthesize_findings(
                    original_query=query,
                    research_results=results,
                    fact_check=fact_check,
                    output_format=options.output_format,
                )
                self.emitter.emit(
                    EventType.RESEARCH_SYNTHESIZE,
                    Lane.RESEARCH,
                    {"sources_used": len(results), "output_length": synthesis.output_length},
                )

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.emitter.emit(
                EventType.SKILL_ERROR,
                Lane.ORCHESTRATOR,
                {
                    "skill_id": skill_id,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "stack": traceback.format_exc(),
                },
                parent_id=run_id,
            )
            self.emitter.emit(
                EventType.SKILL_COMPLETE,
                Lane.ORCHESTRATOR,
                {"skill_id": skill_id, "duration_ms": duration_ms, "success": False},
                parent_id=run_id,
            )
            log.error("research_failed", error=str(e), duration_ms=round(duration_ms))
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.emitter.emit(
            EventType.SKILL_COMPLETE,
            Lane.ORCHESTRATOR,
            {"skill_id": skill_id, "duration_ms": duration_ms, "success": True},
            parent_id=run_id,
        )
        log.info("research_completed", duration_s=round(duration_ms / 1000, 1))

        yield ResearchProgress(
            phase=ResearchPhase.COMPLETE,
            progress=PHASE_PROGRESS[ResearchPhase.COMPLETE],
            message=f"Done in {duration_ms / 1000:.1f}s",
            result=synthesis,
        )

    def _progress(self, phase: ResearchPhase, message: str) -> ResearchProgress:
        return ResearchProgress(phase=phase, progress=PHASE_PROGRESS[phase], message=message)

    def _phase(
        self, skill_id: str, run_id: str | None, phase: ResearchPhase, message: str
    ) -> AbstractContextManager[str | None]:
        """Scope for one phase; its events become children of the progress event."""
        return self.emitter.scope(
            EventType.SKILL_PROGRESS,
            Lane.ORCHESTRATOR,
            {
                "skill_id": skill_id,
                "phase": phase.value,
                "progress": PHASE_PROGRESS[phase],
                "message": message,
            },
            parent_id=run_id,
        )

    @staticmethod
    def order_sub_queries(decomposition: DecompositionResult) -> list[tuple[str, SubQuery]]:
        """Flatten the three buckets and stable-sort by priority (1 first), assigning ids."""
        ordered = sorted(decomposition.all_queries(), key=lambda q: q.priority)
        return [(f"q-{i}", q) for i, q in enumerate(ordered)]

    async def _execute_parallel(
        self,
        ordered: list[tuple[str, SubQuery]],
        depth: ResearchDepth,
        log,
    ) -> list[ResearchResult]:
        """Research every sub-query concurrently; failed calls are dropped."""
        total = len(ordered)
        outcomes = await asyncio.gather(
            *(
                self._research_one(query_id, index, total, sub_query, depth, log)
                for index, (query_id, sub_query) in enumerate(ordered)
            ),
            return_exceptions=True,
        )
        return [o for o in outcomes if isinstance(o, ResearchResult)]

    async def _research_one(
        self,
        query_id: str,
        index: int,
        total: int,
        sub_query: SubQuery,
        depth: ResearchDepth,
        log,
    ) -> ResearchResult | None:
        # Runs in its own task, so this scope is invisible to sibling sub-queries
        log.info("sub_query_started", query_id=query_id, position=f"{index + 1}/{total}",
                 focus=sub_query.focus)
        start_time = time.perf_counter()

        with self.emitter.scope(
            EventType.RESEARCH_QUERY_START,
            Lane.RESEARCH,
            {
                "query_id": query_id,
                "focus": sub_query.focus,
                "priority": sub_query.priority,
                "status": EventStatus.RUNNING.value,
            },
        ):
            try:
                result = await self.functions.research_topic(
                    query=sub_query.query,
                    focus=sub_query.focus,
                    boundary=sub_query.boundary,
                    depth=int(depth),
                )
            except Exception as e:
                self.emitter.emit(
                    EventType.RESEARCH_QUERY_COMPLETE,
                    Lane.RESEARCH,
                    {
                        "query_id": query_id,
                        "focus": sub_query.focus,
                        "status": EventStatus.ERROR.value,
                        "duration_ms": (time.perf_counter() - start_time) * 1000,
                        "findings_count": 0,
                        "error": str(e),
                    },
                )
                log.warning(
                    "sub_query_failed",
                    query_id=query_id,
                    focus=sub_query.focus,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return None

            self.emitter.emit(
                EventType.RESEARCH_QUERY_COMPLETE,
                Lane.RESEARCH,
                {
                    "query_id": query_id,
                    "focus": sub_query.focus,
                    "status": EventStatus.COMPLETE.value,
                    "duration_ms": (time.perf_counter() - start_time) * 1000,
                    "findings_count": len(result.key_findings) if result else 0,
                },
            )
            return result

    @staticmethod
    def extract_claims(results: list[ResearchResult]) -> list[str]:
        """Claims below HIGH confidence, earliest first, capped at MAX_FACT_CHECK_CLAIMS."""
        claims: list[str] = []
        for result in results:
            for finding in result.key_findings:
                if finding.confidence != ConfidenceLevel.HIGH:
                    claims.append(finding.claim)
                    if len(claims) == MAX_FACT_CHECK_CLAIMS:
                        return claims
        return claims
