"""Console rendering with Rich"""

import json
from typing import TYPE_CHECKING, Any, Optional

import structlog
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme
from rich.traceback import install as install_rich_traceback
from rich.tree import Tree

from ..models.enums import OutputFormat
from ..models.research import SynthesisResult

if TYPE_CHECKING:
    from ..models.events import Event
    from ..models.skills import Skill
    from ..observability.listeners import EventCollector
    from ..routing.trie import SkillTrie
    from ..runtime import ExecuteMetadata

QARA_THEME = Theme(
    {
        "info": "cyan",
        "error": "bold red",
        "success": "bold green",
        "skill": "bold cyan",
        "trigger": "dim",
        "confidence": "magenta",
        "latency": "cyan",
        "router": "cyan",
        "orchestrator": "magenta",
        "research": "blue",
        "llm": "yellow",
        "system": "dim",
    }
)


class QaraConsole:
    """Singleton console with Qara theme"""

    _instance: Optional["QaraConsole"] = None

    def __new__(cls) -> "QaraConsole":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, "initialized"):
            self.console = Console(theme=QARA_THEME)
            self.initialized = True

    def print_banner(self):
        self.console.print(
            Panel.fit(
                "[bold cyan]Qara[/bold cyan] - Natural Language Skill Router\n"
                "[dim]Trie Routing • Parallel Research • Event Tracing[/dim]",
                border_style="cyan",
            )
        )

    def print_skills(self, skills: list["Skill"]):
        """Print the skill registry grouped by category"""
        table = Table(title="Available Skills", show_header=True, border_style="cyan")
        table.add_column("Skill", style="skill", no_wrap=True)
        table.add_column("Description")
        table.add_column("Triggers", style="trigger")

        category = None
        for skill in skills:
            if category is not None and skill.category != category:
                table.add_section()
            category = skill.category
            table.add_row(skill.id, skill.description, ", ".join(skill.triggers))

        self.console.print(table)

    def print_route(self, metadata: "ExecuteMetadata"):
        """One-line summary of the matched skill and timing"""
        self.console.print(
            f"[router]\\[router][/router] Matched [skill]{metadata.skill}[/skill] "
            f"([confidence]{metadata.confidence:.0%}[/confidence] {metadata.match_kind.value}) "
            f"in [latency]{metadata.duration_ms:.0f}ms[/latency]"
        )

    def print_trie(self, trie: "SkillTrie"):
        """Print the routing trie, terminal nodes marked with their skills"""
        tree = Tree("[bold cyan]Routing Trie[/bold cyan]")
        branches: dict[tuple[str, ...], Tree] = {(): tree}

        for path, node in trie.iter_paths():
            label = escape(path[-1])
            if node.is_terminal:
                skills = ", ".join(s.id for s in node.skills)
                label = f"[bold]{label}[/bold] [trigger]\\[*] -> {skills}[/trigger]"
            branches[path] = branches[path[:-1]].add(label)

        self.console.print(tree)

    def print_event_tree(self, collector: "EventCollector"):
        """Print collected events as a tree following parent links"""
        tree = Tree("[bold cyan]Event Trace[/bold cyan]")

        def add(branch: Tree, event: "Event") -> None:
            lane = event.lane.value
            node = branch.add(
                f"[{lane}]{event.type.value}[/{lane}] [dim]{escape(_summarize(event.data))}[/dim]"
            )
            for child in collector.children_of(event.id):
                add(node, child)

        for root in collector.roots():
            add(tree, root)

        self.console.print(tree)

    def print_synthesis(self, result: SynthesisResult, output_format: OutputFormat):
        """Print a research report in the requested format"""
        if output_format == OutputFormat.FULL:
            self.console.print(Panel(Markdown(result.executive_brief), title="Executive Brief"))
            self.console.print(Markdown(result.detailed_analysis))
            self.console.print(Panel(Markdown(result.source_appendix), title="Sources"))
        elif output_format == OutputFormat.TABLE:
            table = Table(show_header=True, border_style="cyan")
            table.add_column("Section", style="cyan", no_wrap=True)
            table.add_column("Content")
            table.add_row("Brief", result.executive_brief)
            table.add_row("Analysis", result.detailed_analysis)
            table.add_row("Sources", result.source_appendix)
            self.console.print(table)
        else:
            # Executive and bullet formats are shaped by the model
            self.console.print(Markdown(result.executive_brief))

    def print_result(self, data: Any, output_format: OutputFormat):
        """Print whatever a skill returned"""
        if isinstance(data, SynthesisResult):
            self.print_synthesis(data, output_format)
        elif isinstance(data, str):
            self.console.print(Markdown(data))
        else:
            self.console.print(data)

    def print_success(self, message: str):
        self.console.print(f"[success]✓[/success] {message}")

    def print_error(self, message: str):
        self.console.print(f"[error]✗[/error] {escape(message)}")

    def print_info(self, message: str):
        self.console.print(f"[info]ℹ[/info] {message}")


def _summarize(data: dict[str, Any], limit: int = 100) -> str:
    text = json.dumps({k: v for k, v in data.items() if k != "stack"}, default=str)
    return text if len(text) <= limit else text[: limit - 3] + "..."


# Global console instance
console = QaraConsole()


def setup_rich_logging() -> None:
    """
    Install Rich traceback formatting.

    structlog configuration is handled separately in utils/logging.py.
    """
    install_rich_traceback(
        show_locals=False,
        width=120,
        extra_lines=3,
        theme="monokai",
        word_wrap=False,
        suppress=[structlog],
    )
