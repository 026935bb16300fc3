"""
StrategyCoordinator - оркестратор 5 проходов распознавания цены.

Проходы в строгом порядке:
1. Site Handler → 2. Attribute → 3. DOM Structure → 4. Text Pattern → 5. Contextual

Каждый кандидат нормализуется сразу; невалидный отбрасывается.
Конвейер останавливается, как только есть кандидат с уверенностью
не ниже порога. Иначе выбирается кандидат с максимальной уверенностью,
при равенстве - из более раннего прохода, затем в валюте из настроек.
"""

from dataclasses import replace
from typing import Any, Callable, List, Optional, Sequence, Tuple

from bs4.element import Tag
from loguru import logger

from ..config.settings import DEFAULT_CONFIDENCE_THRESHOLD
from ..contracts.detection_dto import NormalizedPrice
from ..contracts.settings_dto import Settings
from ..dom.structure_analyzer import DomStructureAnalyzer
from ..domain.exceptions import NormalizationError
from ..domain.interfaces import IExtractionStage
from ..domain.models import DetectionResult, ExtractionCandidate, PassEvent, ScanContext, ScanUnit
from ..normalization.price_normalizer import PriceNormalizer
from ..patterns.prefilter import might_contain_price

EventSink = Callable[[PassEvent], None]


class StrategyCoordinator:
    """
    Конвейер проходов.

    ЦКП: DetectionResult с выбранным кандидатом и нормализованной ценой
    (или chosen=None, если цены нет).
    """

    def __init__(
        self,
        stages: Sequence[IExtractionStage],
        normalizer: PriceNormalizer,
        analyzer: DomStructureAnalyzer,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        event_sink: Optional[EventSink] = None,
    ):
        """
        Args:
            stages: Проходы в порядке выполнения
            normalizer: Нормализатор кандидатов
            analyzer: Читатель текста узла
            confidence_threshold: Порог раннего выхода
            event_sink: Приёмник событий проходов (опционально)
        """
        self.stages = list(stages)
        self.normalizer = normalizer
        self.analyzer = analyzer
        self.confidence_threshold = confidence_threshold
        self.event_sink = event_sink
        logger.debug(
            f"[Pipeline] Инициализирован ({len(self.stages)} проходов, порог {confidence_threshold})"
        )

    @property
    def registry(self):
        return self.normalizer.registry

    def extract(self, unit: Any, settings: Optional[Settings] = None, *, hostname: Optional[str] = None) -> DetectionResult:
        """
        Распознаёт цену в единице сканирования.

        Args:
            unit: Строка, узел bs4.Tag или ScanUnit
            settings: Пользовательские настройки (по умолчанию USD, commas/dot)
            hostname: Hostname страницы (для обработчиков сайтов)
        """
        context = self._build_context(unit, settings, hostname)
        result = DetectionResult()
        scored: List[Tuple[ExtractionCandidate, NormalizedPrice, int]] = []
        sequence = 0

        for index, stage in enumerate(self.stages, start=1):
            if not stage.is_applicable(context):
                self._emit(stage.name, "skipped", "нет входных данных", context.text)
                continue
            if stage.uses_prefilter and not scored and not might_contain_price(context.text, self.registry):
                self._emit(stage.name, "skipped", "префильтр: нет признаков цены", context.text)
                continue

            result.passes_run.append(stage.name)
            produced = stage.run(context)
            if not produced:
                self._emit(stage.name, "empty", "кандидатов нет", context.text)

            for candidate in produced:
                candidate = replace(candidate, pass_index=index)
                try:
                    normalized = self.normalizer.normalize(candidate)
                except NormalizationError as e:
                    self._emit(stage.name, "rejected", e.message, candidate.raw_text)
                    continue
                self._emit(stage.name, "found", f"уверенность {candidate.confidence}", candidate.raw_text)
                scored.append((candidate, normalized, sequence))
                sequence += 1

            if any(c.confidence >= self.confidence_threshold for c, _, _ in scored):
                self._emit(stage.name, "early_exit", f"достигнут порог {self.confidence_threshold}")
                break

        return self._finalize(result, scored, context.settings)

    def _finalize(self, result: DetectionResult, scored, settings: Settings) -> DetectionResult:
        preferred_code = (settings.currency_code or "").upper()

        def rank(item):
            candidate, normalized, sequence = item
            # Равные уверенность и проход: валюта пользователя раньше
            other_currency = normalized.currency_code != preferred_code
            return -candidate.confidence, candidate.pass_index, other_currency, sequence

        ordered = sorted(scored, key=rank)

        seen = set()
        for candidate, normalized, _ in ordered:
            key = (normalized.amount_cents, normalized.currency_code)
            if key in seen:
                continue
            seen.add(key)
            result.candidates.append(candidate)
            if result.chosen is None:
                result.chosen = candidate
                result.normalized = normalized

        if result.chosen is None:
            logger.debug(f"[Pipeline] Цена не найдена (проходы: {result.passes_run})")
        else:
            logger.debug(
                f"[Pipeline] Выбрано '{result.chosen.raw_text}' -> "
                f"{result.normalized.amount_cents} {result.normalized.currency_code} "
                f"({result.chosen.strategy.value}, {result.chosen.confidence})"
            )
        return result

    def _build_context(self, unit: Any, settings: Optional[Settings], hostname: Optional[str]) -> ScanContext:
        settings = settings if settings is not None else Settings()
        if isinstance(unit, ScanUnit):
            node = unit.node
            text = unit.text if unit.text is not None else self.analyzer.text_content(node)
            return ScanContext(node=node, text=text, hostname=hostname or unit.hostname, settings=settings)
        if isinstance(unit, Tag):
            return ScanContext(
                node=unit, text=self.analyzer.text_content(unit), hostname=hostname, settings=settings
            )
        if isinstance(unit, str):
            return ScanContext(node=None, text=unit, hostname=hostname, settings=settings)
        raise TypeError(f"Ожидается str, bs4.Tag или ScanUnit, получено: {type(unit).__name__}")

    def _emit(self, pass_name: str, outcome: str, reason: str = "", text: Optional[str] = None) -> None:
        logger.debug(f"[Pipeline] {pass_name}: {outcome} ({reason})" + (f" '{text}'" if text else ""))
        if self.event_sink is not None:
            self.event_sink(PassEvent(pass_name=pass_name, outcome=outcome, reason=reason, text=text))
