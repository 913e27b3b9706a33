"""
Qara runtime: routes natural-language input to a skill and runs it.

The runtime is assembled explicitly by ``create_runtime``; there is no
process-wide instance. Dispatch goes through a table keyed by ``SkillKind``
that must cover every kind, so adding a kind without a handler fails at
construction rather than at request time.
"""

import re
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .core.config import QaraConfig, get_config
from .exceptions import ConfigurationError, NoRouteError
from .llm.client import LLMClient
from .llm.functions import GenerativeFunctions, LiteLLMFunctions
from .models.enums import MatchKind, OutputFormat, SkillKind
from .models.research import ResearchOptions, ResearchProgress
from .models.skills import RouteMatch, Skill
from .observability.emitter import EventEmitter
from .routing.router import SkillRouter
from .skills.registry import SKILLS
from .skills.research.orchestrator import ResearchOrchestrator
from .utils.logging import get_logger

logger = get_logger(__name__)

_LEADING_SEPARATORS = re.compile(r"^[\s:;,.!?-]+")


class ExecuteOptions(BaseModel):
    """Per-call overrides; unset values fall back to skill params, then config."""

    depth: int | None = Field(default=None, ge=1, le=4)
    output_format: OutputFormat | None = None
    skip_validation: bool = False
    skip_fact_check: bool = False


class ExecuteMetadata(BaseModel):
    skill: str
    confidence: float
    match_kind: MatchKind
    duration_ms: float
    timestamp: datetime = Field(default_factory=datetime.now)


class ExecuteResult(BaseModel):
    """Outcome of one ``QaraRuntime.execute`` call."""

    success: bool
    data: Any
    metadata: ExecuteMetadata


SkillHandler = Callable[[RouteMatch, str, ExecuteOptions], Awaitable[Any]]


class QaraRuntime:
    """
    Facade over routing and skill execution.

    Example:
        runtime = create_runtime()
        result = await runtime.execute("deep research quantum computing")
        print(result.data.executive_brief)
    """

    def __init__(
        self,
        router: SkillRouter,
        orchestrator: ResearchOrchestrator,
        functions: GenerativeFunctions,
        emitter: EventEmitter,
        config: QaraConfig,
    ):
        self._router = router
        self.orchestrator = orchestrator
        self.functions = functions
        self.emitter = emitter
        self.config = config

        self._handlers = self._build_handlers()
        missing = [kind.value for kind in SkillKind if kind not in self._handlers]
        if missing:
            raise ConfigurationError(
                f"No handler registered for skill kinds: {', '.join(missing)}",
                field="handlers",
            )

    def _build_handlers(self) -> dict[SkillKind, SkillHandler]:
        return {
            SkillKind.RESEARCH: self._run_research,
            SkillKind.BLOG: self._run_blog,
            SkillKind.CODE: self._run_code,
            SkillKind.HELP: self._run_help,
        }

    @property
    def router(self) -> SkillRouter:
        return self._router

    def list_skills(self) -> list[Skill]:
        return self._router.get_skills()

    async def execute(self, text: str, options: ExecuteOptions | None = None) -> ExecuteResult:
        """
        Route ``text`` and run the matched skill to completion.

        Raises:
            NoRouteError: Nothing in the registry matches the input
            Any exception raised by the skill, unchanged
        """
        options = options or ExecuteOptions()
        start_time = time.perf_counter()
        self.emitter.start_session(text)
        success = False

        try:
            match = self._route(text)
            query = self.extract_query(text, match.skill)
            data = await self._handlers[match.skill.kind](match, query, options)
            success = True
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.emitter.end_session(success, duration_ms)

        logger.info(
            "skill_completed",
            skill=match.skill.id,
            duration_ms=round(duration_ms),
        )
        return ExecuteResult(
            success=True,
            data=data,
            metadata=ExecuteMetadata(
                skill=match.skill.id,
                confidence=match.confidence,
                match_kind=match.match_kind,
                duration_ms=duration_ms,
            ),
        )

    async def stream(
        self, text: str, options: ExecuteOptions | None = None
    ) -> AsyncIterator[ResearchProgress | Any]:
        """
        Route ``text`` and yield results as they become available.

        Research skills yield every ``ResearchProgress`` notification; the
        other skills yield their single result.
        """
        options = options or ExecuteOptions()
        start_time = time.perf_counter()
        self.emitter.start_session(text)
        success = False

        try:
            match = self._route(text)
            query = self.extract_query(text, match.skill)

            if match.skill.kind == SkillKind.RESEARCH:
                async for progress in self.orchestrator.stream(
                    query, self._research_options(match, options)
                ):
                    yield progress
            else:
                yield await self._handlers[match.skill.kind](match, query, options)
            success = True
        finally:
            self.emitter.end_session(success, (time.perf_counter() - start_time) * 1000)

    def _route(self, text: str) -> RouteMatch:
        match = self._router.route(text)
        if match is None:
            logger.info("no_route", input=text)
            raise NoRouteError(text)

        logger.info(
            "route_matched",
            skill=match.skill.id,
            confidence=round(match.confidence, 2),
            match_kind=match.match_kind.value,
        )
        return match

    @staticmethod
    def extract_query(text: str, skill: Skill) -> str:
        """
        Strip the longest trigger phrase that starts ``text`` on a word boundary.

        Whitespace is collapsed before matching and separators left behind
        the trigger (``research: X``) are dropped. Falls back to the raw input
        when no trigger prefixes it or nothing remains after stripping.
        """
        normalized = " ".join(text.split())
        lowered = normalized.lower()

        for trigger in sorted(skill.triggers, key=len, reverse=True):
            if re.match(rf"{re.escape(trigger)}(?!\w)", lowered):
                query = _LEADING_SEPARATORS.sub("", normalized[len(trigger):])
                return query or text
        return text

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _research_options(self, match: RouteMatch, options: ExecuteOptions) -> ResearchOptions:
        depth = options.depth or match.skill.params.get("depth") or self.config.default_depth
        return ResearchOptions(
            depth=depth,
            output_format=options.output_format or self.config.default_output_format,
            skip_validation=options.skip_validation,
            skip_fact_check=options.skip_fact_check,
        )

    async def _run_research(self, match: RouteMatch, query: str, options: ExecuteOptions):
        return await self.orchestrator.execute(query, self._research_options(match, options))

    async def _run_blog(self, match: RouteMatch, query: str, options: ExecuteOptions) -> str:
        return await self.functions.write_blog(query, **match.skill.params)

    async def _run_code(self, match: RouteMatch, query: str, options: ExecuteOptions) -> str:
        return await self.functions.generate_code(query, **match.skill.params)

    async def _run_help(self, match: RouteMatch, query: str, options: ExecuteOptions) -> str:
        lines = ["Available skills:", ""]
        for skill in self.list_skills():
            lines.append(f"  {skill.id:<20} {skill.description}")
            lines.append(f"  {'':<20} triggers: {', '.join(skill.triggers)}")
        return "\n".join(lines)


def create_runtime(
    config: QaraConfig | None = None,
    functions: Any = None,
    emitter: EventEmitter | None = None,
    skills: tuple[Skill, ...] = SKILLS,
) -> QaraRuntime:
    """
    Assemble a runtime from configuration.

    Args:
        config: Settings to build from (defaults to the loaded configuration)
        functions: Implementation of both ``ResearchFunctions`` and
            ``GenerativeFunctions``; defaults to ``LiteLLMFunctions``
        emitter: Event emitter shared by every component
        skills: Skill registry to route over

    Returns:
        Ready-to-use QaraRuntime
    """
    config = config or get_config()
    emitter = emitter if emitter is not None else EventEmitter(enabled=config.events_enabled)

    if functions is None:
        client = LLMClient(
            default_model=config.model,
            timeout=config.llm_timeout,
            temperature=config.temperature,
            max_tokens=config.max_output_tokens,
            emitter=emitter,
        )
        functions = LiteLLMFunctions(client)

    router = SkillRouter(skills, fuzzy_threshold=config.fuzzy_threshold, emitter=emitter)
    orchestrator = ResearchOrchestrator(functions, emitter=emitter)
    return QaraRuntime(router, orchestrator, functions, emitter, config)
