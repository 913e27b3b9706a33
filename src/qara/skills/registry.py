"""
Skill registry.

Static list of every available skill and the phrases that trigger it.
Order matters: when two skills share a trigger, the earlier one wins.
"""

from ..models.enums import SkillKind
from ..models.skills import Skill

SKILLS: tuple[Skill, ...] = (
    # Research
    Skill(
        id="research-quick",
        name="Quick Research",
        description="Fast research overview (15-30 seconds)",
        triggers=(
            "quick research",
            "briefly research",
            "quick look at",
            "fast research",
            "quick search",
        ),
        kind=SkillKind.RESEARCH,
        target_function="ResearchTopic",
        params={"depth": 1},
    ),
    Skill(
        id="research-standard",
        name="Standard Research",
        description="Comprehensive research (30-60 seconds)",
        triggers=(
            "research",
            "investigate",
            "look into",
            "find out about",
            "what is",
            "tell me about",
            "learn about",
        ),
        kind=SkillKind.RESEARCH,
        target_function="ResearchTopic",
        params={"depth": 2},
    ),
    Skill(
        id="research-deep",
        name="Deep Research",
        description="Thorough analysis (1-2 minutes)",
        triggers=(
            "deep research",
            "deep dive",
            "thorough research",
            "comprehensive analysis",
            "detailed research",
            "analyze deeply",
        ),
        kind=SkillKind.RESEARCH,
        target_function="ResearchTopic",
        params={"depth": 3},
    ),
    Skill(
        id="research-extensive",
        name="Extensive Research",
        description="Exhaustive investigation (2-5 minutes)",
        triggers=(
            "extensive research",
            "exhaustive research",
            "complete analysis",
            "full investigation",
            "research everything about",
        ),
        kind=SkillKind.RESEARCH,
        target_function="ResearchTopic",
        params={"depth": 4},
    ),
    # Writing and code
    Skill(
        id="blog-write",
        name="Write Blog Post",
        description="Create a new blog post from a topic",
        triggers=(
            "write blog",
            "create post",
            "draft article",
            "new blog post",
            "write article",
        ),
        kind=SkillKind.BLOG,
        target_function="WriteBlog",
    ),
    Skill(
        id="code-generate",
        name="Generate Code",
        description="Write code based on specifications",
        triggers=(
            "write code",
            "generate code",
            "implement function",
            "create class",
            "code this",
        ),
        kind=SkillKind.CODE,
        target_function="GenerateCode",
    ),
    # Help
    Skill(
        id="help",
        name="Help",
        description="Show available commands and usage",
        triggers=(
            "help",
            "what can you do",
            "show commands",
            "list skills",
        ),
        kind=SkillKind.HELP,
        target_function="ShowHelp",
    ),
)


def get_skills_by_category(category: str) -> list[Skill]:
    """Skills whose id starts with ``category``."""
    return [s for s in SKILLS if s.id.startswith(category)]


def get_skill_ids() -> list[str]:
    return [s.id for s in SKILLS]
