"""
Stage 1: Site Handler
"""

from .stage import SiteHandlerStage

__all__ = ["SiteHandlerStage"]
