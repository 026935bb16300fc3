"""
Stage 3: DOM Structure
"""

from .stage import DomStructureStage

__all__ = ["DomStructureStage"]
