"""
Stage 4: Text Pattern
"""

from .stage import TextPatternStage

__all__ = ["TextPatternStage"]
