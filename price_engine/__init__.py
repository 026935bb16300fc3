"""
Движок распознавания цен на веб-страницах.

Пример:
    from price_engine import Settings, extract_price

    result = extract_price("Only $19.99 today", Settings())
    result.normalized.amount_cents  # 1999
"""

from .application.factory import PriceEngineFactory
from .application.price_extractor import (
    PriceEngine,
    PriceMatchInfo,
    extract_price,
    find_prices,
    get_default_engine,
)
from .contracts.detection_dto import NormalizedPrice
from .contracts.settings_dto import Settings
from .domain.models import DetectionResult, ExtractionCandidate, PassEvent, ScanUnit

__version__ = "0.1.0"

__all__ = [
    "DetectionResult",
    "ExtractionCandidate",
    "NormalizedPrice",
    "PassEvent",
    "PriceEngine",
    "PriceEngineFactory",
    "PriceMatchInfo",
    "ScanUnit",
    "Settings",
    "extract_price",
    "find_prices",
    "get_default_engine",
]
