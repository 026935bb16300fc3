"""
Публичные функции движка.

extract_price - основной вход: многопроходное распознавание.
find_prices   - совместимость со старым API: только скомпилированный
                паттерн и метаданные формата, без прогона конвейера.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

from loguru import logger

from ..contracts.settings_dto import Settings
from ..domain.models import DetectionResult, PatternCategory
from ..extraction.pipeline import StrategyCoordinator
from ..formats.currency_format import CurrencyFormatRule
from ..patterns.text_matcher import PriceTextMatcher
from .factory import PriceEngineFactory


@dataclass
class PriceMatchInfo:
    """Результат find_prices."""

    pattern: re.Pattern
    thousands: str
    decimal: str
    format_info: CurrencyFormatRule

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern.pattern,
            "thousands": self.thousands,
            "decimal": self.decimal,
            "format_info": self.format_info.model_dump(),
        }


class PriceEngine:
    """
    Собранный движок: координатор и поиск по тексту над одним реестром.

    Пример:
        engine = PriceEngine.create()
        result = engine.extract_price("Only $19.99 today")
        result.normalized  # NormalizedPrice(amount_cents=1999, currency_code='USD')
    """

    def __init__(self, coordinator: StrategyCoordinator, matcher: PriceTextMatcher):
        self.coordinator = coordinator
        self.matcher = matcher

    @classmethod
    def create(cls, **kwargs) -> "PriceEngine":
        """Движок с компонентами по умолчанию; kwargs уходят в create_coordinator."""
        matcher = kwargs.pop("matcher", None)
        if matcher is None:
            registry = kwargs.pop("registry", None)
            if registry is None:
                registry = PriceEngineFactory.create_format_registry()
            matcher = PriceEngineFactory.create_text_matcher(registry)
        else:
            kwargs.pop("registry", None)
        coordinator = PriceEngineFactory.create_coordinator(matcher=matcher, **kwargs)
        return cls(coordinator, matcher)

    @property
    def registry(self):
        return self.matcher.registry

    def extract_price(self, unit: Any, settings: Optional[Settings] = None, *, hostname: Optional[str] = None) -> DetectionResult:
        return self.coordinator.extract(unit, settings, hostname=hostname)

    def find_prices(self, text: str, settings: Optional[Settings] = None) -> Optional[PriceMatchInfo]:
        """
        Паттерн для валюты из настроек.

        Незаданные разделители определяются по тексту (формат найденного
        символа/кода, иначе формат по умолчанию). В режиме reverse search
        паттерн требует аннотацию времени после цены: "$20.00 (2h 30m)".

        Returns:
            PriceMatchInfo или None для пустого текста
        """
        if not text:
            return None
        settings = settings if settings is not None else Settings()

        thousands, decimal = settings.thousands, settings.decimal
        if thousands is None or decimal is None:
            detected = self.registry.detect_format_from_text(text) or self.registry.default_format()
            thousands = thousands or detected.thousands
            decimal = decimal or detected.decimal
            logger.debug(f"[find_prices] Разделители по тексту ({detected.id}): {thousands}/{decimal}")

        rule = self.registry.format_for_settings(
            settings.model_copy(update={"thousands": thousands, "decimal": decimal})
        )
        compiler = self.matcher.compiler
        if settings.is_reverse_search:
            price_pattern = compiler.build_reverse_pattern(rule)
        else:
            price_pattern = compiler.build_pattern(rule, PatternCategory.STANDARD)

        return PriceMatchInfo(
            pattern=price_pattern.compiled_matcher,
            thousands=thousands,
            decimal=decimal,
            format_info=rule,
        )


@lru_cache(maxsize=1)
def get_default_engine() -> PriceEngine:
    """Движок по умолчанию для функций модуля. Создаётся при первом вызове."""
    logger.debug("[PriceEngine] Создание движка по умолчанию")
    return PriceEngine.create()


def extract_price(
    unit: Any,
    settings: Optional[Settings] = None,
    *,
    hostname: Optional[str] = None,
    engine: Optional[PriceEngine] = None,
) -> DetectionResult:
    """
    Распознаёт цену в строке, узле bs4.Tag или ScanUnit.

    Args:
        unit: Единица сканирования
        settings: Пользовательские настройки
        hostname: Hostname страницы
        engine: Собственный движок (по умолчанию get_default_engine())
    """
    engine = engine or get_default_engine()
    return engine.extract_price(unit, settings, hostname=hostname)


def find_prices(
    text: str, settings: Optional[Settings] = None, *, engine: Optional[PriceEngine] = None
) -> Optional[PriceMatchInfo]:
    engine = engine or get_default_engine()
    return engine.find_prices(text, settings)
