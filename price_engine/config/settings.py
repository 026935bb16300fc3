"""
Настройки движка распознавания цен.

Все пороги уверенности и ограничения обхода DOM собраны здесь,
чтобы стадии не держали собственных "магических" чисел.
"""

import os
from pathlib import Path

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PACKAGE_ROOT = Path(__file__).parent.parent
CURRENCY_FORMATS_PATH = PACKAGE_ROOT / "formats" / "currency_formats.yaml"

# =============================================================================
# ЛОГИРОВАНИЕ
# =============================================================================
LOG_LEVEL = os.getenv("PRICE_ENGINE_LOG_LEVEL", "INFO")

# =============================================================================
# ФОРМАТЫ ВАЛЮТ
# =============================================================================
# Формат по умолчанию, если в тексте не найден ни символ, ни код
DEFAULT_FORMAT_ID = "USD"

# Маркер уже аннотированной цены: "$20.00 (2h 30m)"
TIME_ANNOTATION_PATTERN = r"\s\(\d+h\s\d+m\)"

# =============================================================================
# УВЕРЕННОСТЬ ПО ПРОХОДАМ
# =============================================================================
# Ранний выход: первый кандидат с уверенностью >= порога завершает конвейер
DEFAULT_CONFIDENCE_THRESHOLD = 0.9

SITE_HANDLER_MIN_CONFIDENCE = 0.95
ATTRIBUTE_CONFIDENCE = 0.9
DOM_STRUCTURE_CONFIDENCE = 0.85

# Проход 4: уверенность зависит от категории паттерна
STANDARD_CONFIDENCE = 0.9
COUNTRY_PREFIXED_CONFIDENCE = 0.85
SPACED_CONFIDENCE = 0.8
SYMBOL_BETWEEN_CONFIDENCE = 0.75

# Проход 5: контекст ("under $20") и диапазоны ("$10 - $20")
CONTEXTUAL_CONFIDENCE = 0.6
CONTEXTUAL_MINIMUM_BONUS = 0.1
RANGE_CONFIDENCE = 0.65

# Слова, перед которыми стоит нижняя граница цены
CONTEXT_KEYWORDS = [
    "starting from",
    "starting at",
    "as low as",
    "less than",
    "up to",
    "under",
    "from",
    "only",
]
MINIMUM_PRICE_KEYWORDS = ["from", "starting at", "starting from", "as low as"]

# =============================================================================
# ОГРАНИЧЕНИЯ ОБХОДА DOM
# =============================================================================
MAX_CANDIDATE_TEXTS = 6
MAX_ASSEMBLY_DEPTH = 3
MAX_FRAGMENTS = 12
MAX_TEXT_LENGTH = 200
MAX_TEXT_CONTENT_LENGTH = 1000
