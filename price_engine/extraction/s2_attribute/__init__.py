"""
Stage 2: Attribute Extraction
"""

from .stage import AttributeStage

__all__ = ["AttributeStage"]
