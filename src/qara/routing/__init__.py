"""
Trie-based skill routing.
"""

from .router import DEFAULT_FUZZY_THRESHOLD, SkillRouter
from .tokenizer import token_overlap, tokenize
from .trie import SkillTrie, TrieNode

__all__ = [
    "SkillRouter",
    "SkillTrie",
    "TrieNode",
    "tokenize",
    "token_overlap",
    "DEFAULT_FUZZY_THRESHOLD",
]
