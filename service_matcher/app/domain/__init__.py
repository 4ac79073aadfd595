"""
Domain logic for the Matcher Service.
"""

from .matcher import MatcherOrchestrator

__all__ = [
    "MatcherOrchestrator",
]
