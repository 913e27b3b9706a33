"""
Pydantic models defining the contracts of every research phase.
"""

from pydantic import BaseModel, Field

from .enums import ConfidenceLevel, OutputFormat, ResearchPhase, Verdict

# ============================================================================
# Phase 1: Validation
# ============================================================================


class ValidationResult(BaseModel):
    """Scope check returned by the validation phase."""

    is_clear: bool
    topics: list[str] = Field(default_factory=list)
    relationship: str = Field(default="single", description="How the topics relate")
    time_period: str = Field(default="unspecified")
    primary_sources: list[str] = Field(default_factory=list)
    recommended_structure: str = Field(default="standard")
    clarification_needed: list[str] | None = None

    @classmethod
    def single_topic(cls, query: str) -> "ValidationResult":
        """Stand-in used when validation is skipped."""
        return cls(
            is_clear=True,
            topics=[query],
            relationship="single",
            time_period="unspecified",
            primary_sources=[],
            recommended_structure="standard",
        )


# ============================================================================
# Phase 2: Decomposition
# ============================================================================


class SubQuery(BaseModel):
    """One unit of parallel research work."""

    query: str
    focus: str
    boundary: str = Field(
        default="", description="What this sub-query must NOT cover (advisory)"
    )
    priority: int = Field(default=1, ge=1, description="1 = highest priority")


class DecompositionResult(BaseModel):
    """Three buckets of sub-queries produced by decomposition."""

    primary_queries: list[SubQuery] = Field(default_factory=list)
    validation_queries: list[SubQuery] = Field(default_factory=list)
    edge_queries: list[SubQuery] = Field(default_factory=list)

    def all_queries(self) -> list[SubQuery]:
        """Flatten the buckets in declaration order."""
        return [*self.primary_queries, *self.validation_queries, *self.edge_queries]

    @property
    def query_count(self) -> int:
        return len(self.primary_queries) + len(self.validation_queries) + len(self.edge_queries)


# ============================================================================
# Phase 3: Parallel research
# ============================================================================


class Source(BaseModel):
    """A cited source."""

    title: str
    url: str | None = None
    publisher: str | None = None
    date: str | None = None


class Finding(BaseModel):
    """A single claim with its confidence."""

    claim: str
    confidence: ConfidenceLevel = ConfidenceLevel.UNVERIFIED
    sources: list[Source] = Field(default_factory=list)


class ResearchResult(BaseModel):
    """Output of one sub-query research call."""

    query: str
    focus: str
    summary: str = ""
    key_findings: list[Finding] = Field(default_factory=list)
    sources: list[Source] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)


# ============================================================================
# Phase 4: Fact-check
# ============================================================================


class ClaimVerdict(BaseModel):
    """Verdict for one checked claim."""

    claim: str
    verdict: Verdict
    explanation: str = ""
    sources: list[Source] = Field(default_factory=list)


class FactCheckResponse(BaseModel):
    """Verdicts for every submitted claim."""

    results: list[ClaimVerdict] = Field(default_factory=list)

    @property
    def verified_count(self) -> int:
        return sum(1 for r in self.results if r.verdict == Verdict.VERIFIED)

    @property
    def flagged_count(self) -> int:
        return sum(
            1 for r in self.results if r.verdict in (Verdict.DISPUTED, Verdict.UNVERIFIABLE)
        )


# ============================================================================
# Phase 5: Synthesis
# ============================================================================


class SynthesisResult(BaseModel):
    """Three-tier research report."""

    executive_brief: str
    detailed_analysis: str
    source_appendix: str

    @property
    def output_length(self) -> int:
        return len(self.detailed_analysis) + len(self.source_appendix)


# ============================================================================
# Orchestration
# ============================================================================


class ResearchOptions(BaseModel):
    """Per-run research parameters."""

    depth: int = Field(default=2, ge=1, le=4, description="Breadth level 1-4")
    output_format: OutputFormat = OutputFormat.EXECUTIVE
    skip_validation: bool = False
    skip_fact_check: bool = False


class ResearchProgress(BaseModel):
    """Progress notification yielded by the research pipeline."""

    phase: ResearchPhase
    progress: float = Field(..., ge=0.0, le=1.0)
    message: str
    result: SynthesisResult | None = None
