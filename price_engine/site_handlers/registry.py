"""
Реестр обработчиков сайтов.

Обработчики регистрируются явно. Для hostname вызываются все подходящие
обработчики в порядке регистрации до первого результата.
"""

from dataclasses import replace
from typing import Any, List, Optional

from loguru import logger

from ..config.settings import SITE_HANDLER_MIN_CONFIDENCE
from ..domain.exceptions import FormatConfigurationError, PriceEngineError
from ..domain.interfaces import ISiteHandler
from ..domain.models import ExtractionCandidate, ExtractionStrategy
from .base import normalize_hostname


class SiteHandlerRegistry:
    """
    Пример:
        registry = SiteHandlerRegistry()
        registry.register(AmazonHandler(matcher))
        candidate = registry.extract("www.amazon.com", node)
    """

    def __init__(self, min_confidence: float = SITE_HANDLER_MIN_CONFIDENCE):
        self.min_confidence = min_confidence
        self._handlers: List[ISiteHandler] = []

    def register(self, handler: ISiteHandler) -> None:
        self._handlers.append(handler)
        logger.debug(f"[SiteHandlers] Зарегистрирован обработчик: {handler.name}")

    def handlers_for(self, hostname: Optional[str]) -> List[ISiteHandler]:
        host = normalize_hostname(hostname)
        if not host:
            return []
        return [h for h in self._handlers if h.domain_predicate(host)]

    def extract(self, hostname: Optional[str], node: Any) -> Optional[ExtractionCandidate]:
        """
        Результат первого обработчика, вернувшего кандидата.

        Уверенность результата поднимается минимум до min_confidence.
        Исключение движка внутри обработчика считается отсутствием результата,
        кроме ошибок конфигурации форматов: они пробрасываются.
        """
        for handler in self.handlers_for(hostname):
            try:
                candidate = handler.extract(node)
            except FormatConfigurationError:
                raise
            except PriceEngineError as e:
                logger.debug(f"[SiteHandlers] {handler.name}: ошибка обработчика: {e}")
                continue
            if candidate is None:
                logger.debug(f"[SiteHandlers] {handler.name}: цена не найдена")
                continue

            logger.debug(f"[SiteHandlers] {handler.name}: найдено '{candidate.raw_text}'")
            return replace(
                candidate,
                strategy=ExtractionStrategy.SITE_HANDLER,
                confidence=max(candidate.confidence, self.min_confidence),
            )
        return None

    def __len__(self) -> int:
        return len(self._handlers)
