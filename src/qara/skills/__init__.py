"""
Skill registry and skill implementations.
"""

from .registry import SKILLS, get_skill_ids, get_skills_by_category

__all__ = [
    "SKILLS",
    "get_skill_ids",
    "get_skills_by_category",
]
