"""Enums for type-safe routing, research and tracing values.

Every enum subclasses ``str`` so values serialize directly into events,
JSON lines and configuration files.
"""

from enum import Enum, IntEnum


class MatchKind(str, Enum):
    """How a route was matched.

    Attributes:
        EXACT: Trigger path consumed every input token
        PREFIX: Trigger path consumed a leading subset of the input tokens
        FUZZY: No trigger path matched; keyword overlap fallback was used
    """
    EXACT = "exact"
    PREFIX = "prefix"
    FUZZY = "fuzzy"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


class SkillKind(str, Enum):
    """Closed set of skill families, each bound to one runtime handler.

    Attributes:
        RESEARCH: Multi-phase research pipeline
        BLOG: Single-call blog post generation
        CODE: Single-call code generation
        HELP: Local help text, no model call
    """
    RESEARCH = "research"
    BLOG = "blog"
    CODE = "code"
    HELP = "help"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


class ResearchDepth(IntEnum):
    """Research breadth levels."""
    QUICK = 1
    STANDARD = 2
    DEEP = 3
    EXTENSIVE = 4

    @property
    def label(self) -> str:
        return self.name.lower()


class OutputFormat(str, Enum):
    """Requested presentation of a synthesized report.

    Attributes:
        EXECUTIVE: Executive brief first, details on request
        FULL: Brief, detailed analysis and source appendix
        BULLETS: Bullet list of key points
        TABLE: Tabular summary
    """
    EXECUTIVE = "executive"
    FULL = "full"
    BULLETS = "bullets"
    TABLE = "table"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


class ConfidenceLevel(str, Enum):
    """Confidence attached to a single research finding."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNVERIFIED = "UNVERIFIED"

    def __str__(self) -> str:
        return self.value


class Verdict(str, Enum):
    """Fact-check verdict for one claim."""
    VERIFIED = "VERIFIED"
    PARTIALLY_VERIFIED = "PARTIALLY_VERIFIED"
    DISPUTED = "DISPUTED"
    UNVERIFIABLE = "UNVERIFIABLE"

    def __str__(self) -> str:
        return self.value


class ResearchPhase(str, Enum):
    """Pipeline phases reported by progress notifications."""
    VALIDATE = "validate"
    DECOMPOSE = "decompose"
    RESEARCH = "research"
    FACTCHECK = "factcheck"
    SYNTHESIZE = "synthesize"
    COMPLETE = "complete"

    def __str__(self) -> str:
        return self.value


class EventType(str, Enum):
    """Trace event tags."""
    SESSION_START = "session.start"
    SESSION_END = "session.end"
    SKILL_ROUTE = "skill.route"
    SKILL_START = "skill.start"
    SKILL_PROGRESS = "skill.progress"
    SKILL_COMPLETE = "skill.complete"
    SKILL_ERROR = "skill.error"
    RESEARCH_VALIDATE = "research.validate"
    RESEARCH_DECOMPOSE = "research.decompose"
    RESEARCH_QUERY_START = "research.query.start"
    RESEARCH_QUERY_COMPLETE = "research.query.complete"
    RESEARCH_FACTCHECK = "research.factcheck"
    RESEARCH_SYNTHESIZE = "research.synthesize"
    LLM_REQUEST = "llm.request"
    LLM_RESPONSE = "llm.response"

    def __str__(self) -> str:
        return self.value


class Lane(str, Enum):
    """Swim lanes used to group events for display."""
    ROUTER = "router"
    ORCHESTRATOR = "orchestrator"
    RESEARCH = "research"
    LLM = "llm"
    SYSTEM = "system"

    def __str__(self) -> str:
        return self.value


class EventStatus(str, Enum):
    """Status carried by sub-query events."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


class LogLevel(str, Enum):
    """Standard logging levels.

    Attributes:
        DEBUG: Detailed diagnostic information
        INFO: General informational messages
        WARNING: Warning messages for potentially problematic situations
        ERROR: Error messages for serious problems
        CRITICAL: Critical messages for severe errors
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


__all__ = [
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
