"""
Prefix tree over trigger-phrase tokens.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from ..models.skills import Skill
from .tokenizer import tokenize


@dataclass
class TrieNode:
    """One token position in the trie. The root carries no token."""

    children: dict[str, "TrieNode"] = field(default_factory=dict)
    skills: list[Skill] = field(default_factory=list)
    is_terminal: bool = False


class SkillTrie:
    """
    Token trie mapping trigger phrases to skills.

    Nodes are only ever added during construction. Several skills may end on
    the same node; the first one inserted wins at lookup time.

    Example:
        trie = SkillTrie.from_skills(skills)
        skill, depth = trie.longest_match(["deep", "research", "ai"])
    """

    def __init__(self):
        self.root = TrieNode()

    @classmethod
    def from_skills(cls, skills: Iterable[Skill]) -> "SkillTrie":
        trie = cls()
        for skill in skills:
            for trigger in skill.triggers:
                trie.insert(tokenize(trigger), skill)
        return trie

    def insert(self, tokens: list[str], skill: Skill) -> None:
        """Walk/extend the trie along ``tokens`` and attach ``skill`` to the last node."""
        if not tokens:
            return

        node = self.root
        for token in tokens:
            child = node.children.get(token)
            if child is None:
                child = TrieNode()
                node.children[token] = child
            node = child

        node.is_terminal = True
        node.skills.append(skill)

    def longest_match(self, tokens: list[str]) -> tuple[Skill | None, int]:
        """
        Walk the trie along ``tokens`` and return the deepest terminal visited.

        Returns:
            (skill, depth) where depth is the number of tokens consumed, or
            (None, 0) when no terminal node lies on the path
        """
        node = self.root
        best: Skill | None = None
        depth = 0

        for i, token in enumerate(tokens):
            child = node.children.get(token)
            if child is None:
                break
            node = child
            if node.is_terminal and node.skills:
                best = node.skills[0]
                depth = i + 1

        return best, depth

    def iter_paths(self) -> Iterator[tuple[tuple[str, ...], TrieNode]]:
        """Depth-first iteration over every (token path, node) below the root."""
        stack: list[tuple[tuple[str, ...], TrieNode]] = [
            ((token,), child) for token, child in reversed(self.root.children.items())
        ]
        while stack:
            path, node = stack.pop()
            yield path, node
            stack.extend(
                (path + (token,), child) for token, child in reversed(node.children.items())
            )

    def describe(self) -> list[str]:
        """Indented debug listing, terminal nodes marked with ``[*]``."""
        lines = []
        for path, node in self.iter_paths():
            marker = " [*]" if node.is_terminal else ""
            skills = ", ".join(s.id for s in node.skills)
            suffix = f" -> {skills}" if skills else ""
            lines.append(f"{'  ' * (len(path) - 1)}{path[-1]}{marker}{suffix}")
        return lines
