"""
Multi-phase research skill.
"""

from .orchestrator import MAX_FACT_CHECK_CLAIMS, ResearchOrchestrator

__all__ = [
    "ResearchOrchestrator",
    "MAX_FACT_CHECK_CLAIMS",
]
