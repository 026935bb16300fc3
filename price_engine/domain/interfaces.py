"""
Интерфейсы (абстрактные классы) движка распознавания цен.

Движок отвечает за:
1. Обработчики конкретных сайтов
2. Извлечение цены из атрибутов узла
3. Сборку текста из дочерних элементов
4. Поиск цены в тексте по паттернам
5. Контекстные цены и диапазоны
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .models import ExtractionCandidate, ScanContext


class IExtractionStage(ABC):
    """Интерфейс прохода конвейера."""

    name: str = "stage"

    # Проход можно пропустить по быстрому префильтру
    uses_prefilter: bool = False

    def is_applicable(self, context: ScanContext) -> bool:
        """Есть ли у прохода входные данные (узел, hostname, текст)."""
        return True

    @abstractmethod
    def run(self, context: ScanContext) -> List[ExtractionCandidate]:
        """
        Выполняет проход.

        Args:
            context: Контекст вызова (узел, текст, hostname, настройки)

        Returns:
            Кандидаты прохода (возможно пустой список)
        """
        pass


class ISiteHandler(ABC):
    """Интерфейс обработчика разметки конкретного сайта."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def domain_predicate(self, hostname: str) -> bool:
        """Обслуживает ли обработчик данный hostname (уже нормализованный)."""
        pass

    @abstractmethod
    def extract(self, node: Any) -> Optional[ExtractionCandidate]:
        """Извлекает цену из узла или возвращает None."""
        pass
