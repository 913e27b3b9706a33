"""
Language-model boundary: LiteLLM client and structured skill functions.
"""

from .client import LLMClient
from .functions import GenerativeFunctions, LiteLLMFunctions, ResearchFunctions

__all__ = [
    "LLMClient",
    "LiteLLMFunctions",
    "ResearchFunctions",
    "GenerativeFunctions",
]
