"""
Фабрика компонентов движка.

Собирает реестр форматов, компилятор, поиск по тексту, анализатор DOM,
обработчики сайтов и координатор. Любой компонент можно передать готовым.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.settings import DEFAULT_CONFIDENCE_THRESHOLD
from ..dom.structure_analyzer import DomStructureAnalyzer
from ..extraction.pipeline import EventSink, StrategyCoordinator
from ..extraction.s1_site_handler import SiteHandlerStage
from ..extraction.s2_attribute import AttributeStage
from ..extraction.s3_dom_structure import DomStructureStage
from ..extraction.s4_text_pattern import TextPatternStage
from ..extraction.s5_contextual import ContextualStage
from ..formats.format_registry import CurrencyFormatRegistry
from ..normalization.price_normalizer import PriceNormalizer
from ..patterns.pattern_compiler import PatternCompiler
from ..patterns.text_matcher import PriceTextMatcher
from ..site_handlers.amazon import AmazonHandler
from ..site_handlers.cdiscount import CdiscountHandler
from ..site_handlers.ebay import EbayHandler
from ..site_handlers.gearbest import GearbestHandler
from ..site_handlers.registry import SiteHandlerRegistry


class PriceEngineFactory:
    """Фабрика для создания компонентов движка."""

    @staticmethod
    def create_format_registry(path: Optional[Path] = None) -> CurrencyFormatRegistry:
        logger.debug("[PriceEngine] Создание CurrencyFormatRegistry")
        return CurrencyFormatRegistry.from_defaults(path)

    @staticmethod
    def create_pattern_compiler(registry: CurrencyFormatRegistry) -> PatternCompiler:
        return PatternCompiler(registry)

    @staticmethod
    def create_text_matcher(
        registry: CurrencyFormatRegistry, compiler: Optional[PatternCompiler] = None
    ) -> PriceTextMatcher:
        return PriceTextMatcher(registry, compiler or PatternCompiler(registry))

    @staticmethod
    def create_structure_analyzer() -> DomStructureAnalyzer:
        return DomStructureAnalyzer()

    @staticmethod
    def create_site_handler_registry(matcher: PriceTextMatcher, builtin: bool = True) -> SiteHandlerRegistry:
        """
        Args:
            matcher: Поиск по тексту для обработчиков
            builtin: Зарегистрировать Amazon, eBay, Cdiscount, Gearbest
        """
        handlers = SiteHandlerRegistry()
        if builtin:
            for handler_cls in (AmazonHandler, EbayHandler, CdiscountHandler, GearbestHandler):
                handlers.register(handler_cls(matcher))
        return handlers

    @staticmethod
    def create_normalizer(registry: CurrencyFormatRegistry) -> PriceNormalizer:
        return PriceNormalizer(registry)

    @staticmethod
    def create_coordinator(
        registry: Optional[CurrencyFormatRegistry] = None,
        matcher: Optional[PriceTextMatcher] = None,
        analyzer: Optional[DomStructureAnalyzer] = None,
        handlers: Optional[SiteHandlerRegistry] = None,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        event_sink: Optional[EventSink] = None,
    ) -> StrategyCoordinator:
        """Координатор с 5 стандартными проходами."""
        logger.debug("[PriceEngine] Создание StrategyCoordinator")
        if registry is None:
            registry = matcher.registry if matcher is not None else PriceEngineFactory.create_format_registry()
        if matcher is None:
            matcher = PriceEngineFactory.create_text_matcher(registry)
        if analyzer is None:
            analyzer = PriceEngineFactory.create_structure_analyzer()
        handlers = handlers if handlers is not None else PriceEngineFactory.create_site_handler_registry(matcher)

        stages = [
            SiteHandlerStage(handlers),
            AttributeStage(analyzer, matcher),
            DomStructureStage(analyzer, matcher),
            TextPatternStage(matcher),
            ContextualStage(matcher),
        ]
        return StrategyCoordinator(
            stages,
            normalizer=PriceEngineFactory.create_normalizer(registry),
            analyzer=analyzer,
            confidence_threshold=confidence_threshold,
            event_sink=event_sink,
        )
