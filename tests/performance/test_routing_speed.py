"""
Performance regression guards for routing.

Tests cover:
- Average routing latency over the built-in registry
- Fuzzy fallback latency
"""

import time

import pytest
from qara.observability.emitter import EventEmitter
from qara.routing.router import SkillRouter
from qara.skills.registry import SKILLS

INPUTS = [
    "research AI safety developments",
    "deep research quantum computing",
    "quick research BAML",
    "write blog about distributed systems",
    "generate code for a trie",
    "help",
    "please investigate",
    "xyzzy foobar baz",
]


@pytest.mark.performance
@pytest.mark.slow
class TestRoutingSpeed:
    """Routing must stay sub-millisecond on average."""

    @pytest.mark.parametrize("emitting", [False, True])
    def test_average_route_under_one_ms(self, emitting):
        router = SkillRouter(SKILLS, emitter=EventEmitter(enabled=emitting))
        iterations = 1000

        start = time.perf_counter()
        for i in range(iterations):
            router.route(INPUTS[i % len(INPUTS)])
        average_ms = (time.perf_counter() - start) * 1000 / iterations

        assert average_ms < 1.0, f"average routing took {average_ms:.3f}ms"

    def test_fuzzy_fallback_under_one_ms(self):
        router = SkillRouter(SKILLS, emitter=EventEmitter(enabled=False))
        iterations = 1000

        start = time.perf_counter()
        for _ in range(iterations):
            router.route("please investigate the thing")
        average_ms = (time.perf_counter() - start) * 1000 / iterations

        assert average_ms < 1.0, f"average fuzzy routing took {average_ms:.3f}ms"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
