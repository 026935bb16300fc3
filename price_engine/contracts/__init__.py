"""DTO контракты движка."""

from .detection_dto import NormalizedPrice
from .settings_dto import Settings

__all__ = ["NormalizedPrice", "Settings"]
