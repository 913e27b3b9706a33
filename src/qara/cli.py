"""
Command-line interface for qara.

Routes natural-language input to a skill and prints the result.
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import typer

from . import __version__
from .core.config import get_config
from .models.enums import OutputFormat
from .models.research import ResearchProgress
from .observability.listeners import EventCollector, JsonlEventSink, console_logger
from .routing.router import SkillRouter
from .runtime import ExecuteOptions, QaraRuntime, create_runtime
from .skills.registry import SKILLS
from .utils.logging import setup_logging
from .utils.rich_logging import console

app = typer.Typer(
    name="qara",
    help="Natural-language skill router with parallel multi-phase research",
    add_completion=False,
)


@app.command()
def version():
    """Show version information."""
    console.console.print(f"[bold cyan]qara[/bold cyan] version {__version__}")


@app.command("list")
def list_skills():
    """List all available skills."""
    console.print_banner()
    console.print_skills(list(SKILLS))


@app.command()
def trie():
    """Show the routing trie built from every trigger phrase."""
    router = SkillRouter(SKILLS, fuzzy_threshold=get_config().fuzzy_threshold)
    console.print_trie(router.trie)


@app.command()
def run(
    text: Optional[List[str]] = typer.Argument(None, help="Natural language input"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show routing metadata"),
    stream: bool = typer.Option(False, "--stream", "-s", help="Print progress as it happens"),
    depth: Optional[int] = typer.Option(
        None, "--depth", "-d", min=1, max=4, help="Research depth (1-4)"
    ),
    output_format: Optional[OutputFormat] = typer.Option(
        None, "--format", "-f", help="Output format"
    ),
    observe: bool = typer.Option(False, "--observe", "-o", help="Print the event trace tree"),
    events_file: Optional[Path] = typer.Option(
        None, "--events-file", help="Append trace events to a JSONL file"
    ),
):
    """
    Route TEXT to a skill and run it.

    Examples:
        qara run research AI safety
        qara run "deep research quantum computing" --format full
        qara run quick research BAML --verbose --observe
    """
    user_input = " ".join(text or []).strip()
    if not user_input:
        console.print_error("No input provided")
        console.print_info('Run "qara --help" for usage')
        sys.exit(1)

    config = get_config()
    setup_logging(config)
    runtime = create_runtime(config)

    unsubscribers = []
    collector = EventCollector()
    if observe:
        unsubscribers.append(runtime.emitter.subscribe(collector))
        if verbose:
            unsubscribers.append(runtime.emitter.subscribe(console_logger))

    sink: Optional[JsonlEventSink] = None
    events_path = events_file or config.events_log_file
    if events_path is not None:
        sink = JsonlEventSink(events_path)
        unsubscribers.append(runtime.emitter.subscribe(sink))

    options = ExecuteOptions(depth=depth, output_format=output_format)
    output_format = output_format or config.default_output_format

    try:
        if stream:
            asyncio.run(_stream(runtime, user_input, options, output_format))
        else:
            result = asyncio.run(runtime.execute(user_input, options))
            if verbose:
                console.print_route(result.metadata)
            console.print_result(result.data, output_format)
    except Exception as e:
        console.print_error(f"Error: {e}")
        sys.exit(1)
    finally:
        for unsubscribe in unsubscribers:
            unsubscribe()
        if sink is not None:
            sink.close()
            console.print_success(f"Trace written to {events_path}")
        if observe:
            console.print_event_tree(collector)


async def _stream(
    runtime: QaraRuntime, user_input: str, options: ExecuteOptions, output_format: OutputFormat
) -> None:
    async for chunk in runtime.stream(user_input, options):
        if isinstance(chunk, ResearchProgress):
            if chunk.result is not None:
                console.print_result(chunk.result, output_format)
            else:
                console.console.print(
                    f"[research]\\[{chunk.phase.value}][/research] "
                    f"{chunk.progress:.0%} {chunk.message}"
                )
        else:
            console.print_result(chunk, output_format)
