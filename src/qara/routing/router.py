"""
Skill Router - deterministic routing of free text to skills.

Routing walks a token trie built from every skill's trigger phrases, so the
cost of a lookup grows with the number of input tokens and not with the size
of the registry. Only when no trigger path matches at all does it fall back
to a keyword-overlap scan over every trigger.
"""

import time
from collections.abc import Iterable

from ..models.enums import EventType, Lane, MatchKind
from ..models.skills import RouteMatch, Skill
from ..observability.emitter import EventEmitter
from .tokenizer import token_overlap, tokenize
from .trie import SkillTrie

DEFAULT_FUZZY_THRESHOLD = 0.3


class SkillRouter:
    """
    Routes input text to a registered skill.

    Example:
        router = SkillRouter(SKILLS)
        match = router.route("deep research quantum computing")
        if match:
            print(match.skill.id, match.confidence, match.match_kind)
    """

    def __init__(
        self,
        skills: Iterable[Skill],
        fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
        emitter: EventEmitter | None = None,
    ):
        """
        Build the router.

        Args:
            skills: Registry records; order decides ties
            fuzzy_threshold: Minimum overlap score accepted by the fuzzy fallback
            emitter: Receives a ``skill.route`` event for every match
        """
        self._skills: dict[str, Skill] = {}
        for skill in skills:
            self._skills.setdefault(skill.id, skill)

        self.fuzzy_threshold = fuzzy_threshold
        self.emitter = emitter if emitter is not None else EventEmitter()
        self.trie = SkillTrie.from_skills(self._skills.values())
        self._trigger_sets: list[tuple[Skill, set[str]]] = [
            (skill, set(tokenize(trigger)))
            for skill in self._skills.values()
            for trigger in skill.triggers
        ]

    def route(self, text: str) -> RouteMatch | None:
        """
        Route input to a skill.

        Prefix matches always win over fuzzy matches; the fuzzy scan only
        runs when the trie walk finds nothing.

        Returns:
            RouteMatch, or None when nothing matches
        """
        start = time.perf_counter()
        tokens = tokenize(text)

        skill, depth = self.trie.longest_match(tokens)
        if skill is not None:
            match = RouteMatch(
                skill=skill,
                confidence=min(depth / max(len(tokens), 1), 1.0),
                tokens=tuple(tokens),
                match_kind=MatchKind.EXACT if depth == len(tokens) else MatchKind.PREFIX,
            )
        else:
            match = self._fuzzy_match(tokens)

        if match is not None:
            self.emitter.emit(
                EventType.SKILL_ROUTE,
                Lane.ROUTER,
                {
                    "input": text,
                    "matched_skill": match.skill.id,
                    "confidence": match.confidence,
                    "match_kind": match.match_kind.value,
                    "routing_time_ms": (time.perf_counter() - start) * 1000,
                },
            )
        return match

    def _fuzzy_match(self, tokens: list[str]) -> RouteMatch | None:
        """Keyword-overlap fallback; earliest registered skill wins ties."""
        input_set = set(tokens)
        best_skill: Skill | None = None
        best_score = 0.0

        for skill, trigger_set in self._trigger_sets:
            score = token_overlap(input_set, trigger_set)
            if score > best_score:
                best_score = score
                best_skill = skill

        if best_skill is None or best_score < self.fuzzy_threshold:
            return None

        return RouteMatch(
            skill=best_skill,
            confidence=best_score,
            tokens=tuple(tokens),
            match_kind=MatchKind.FUZZY,
        )

    def get_skills(self) -> list[Skill]:
        """All registered skills in registration order."""
        return list(self._skills.values())

    def get_skill(self, skill_id: str) -> Skill | None:
        return self._skills.get(skill_id)
