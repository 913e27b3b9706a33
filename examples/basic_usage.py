"""
Basic usage example for qara.

Routes a few inputs, then runs a streamed research query and prints the
event trace. Requires an API key for the configured model
(QARA_MODEL, default gemini/gemini-2.0-flash-exp).
"""

import asyncio

from qara import ExecuteOptions, create_runtime
from qara.core.config import QaraConfig
from qara.models.research import ResearchProgress
from qara.observability.listeners import EventCollector
from qara.utils.rich_logging import console


async def main():
    print("🚀 qara - Natural Language Skill Router Demo\n")

    runtime = create_runtime(QaraConfig())

    # ========================================================================
    # Step 1: Routing only
    # ========================================================================
    print("📋 Step 1: Routing")
    print("-" * 50)

    for text in ["research AI safety", "deep research quantum", "please investigate", "xyzzy"]:
        match = runtime.router.route(text)
        if match is None:
            print(f"  {text!r:32} -> no match")
        else:
            print(
                f"  {text!r:32} -> {match.skill.id} "
                f"({match.confidence:.0%} {match.match_kind.value})"
            )

    # ========================================================================
    # Step 2: Streamed research with tracing
    # ========================================================================
    print("\n🔍 Step 2: Quick research")
    print("-" * 50)

    collector = EventCollector()
    unsubscribe = runtime.emitter.subscribe(collector)
    try:
        async for chunk in runtime.stream("quick research BAML", ExecuteOptions()):
            if isinstance(chunk, ResearchProgress) and chunk.result is None:
                print(f"  [{chunk.phase.value}] {chunk.progress:.0%} {chunk.message}")
            elif isinstance(chunk, ResearchProgress):
                print(f"\n{chunk.result.executive_brief}")
    finally:
        unsubscribe()

    console.print_event_tree(collector)


if __name__ == "__main__":
    asyncio.run(main())
