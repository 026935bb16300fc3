"""
Stage 5: Contextual
"""

from .stage import ContextualStage, contextual_confidence

__all__ = ["ContextualStage", "contextual_confidence"]
