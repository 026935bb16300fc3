"""
Загрузчик форматов валют из YAML.

Структура файла:
    default_format: USD
    formats:
      - id: USD
        symbols: ["$"]
        codes: [USD]
        ...

Использует Pydantic для валидации каждого правила.
"""

from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from loguru import logger
from pydantic import ValidationError

from ..config.settings import CURRENCY_FORMATS_PATH, DEFAULT_FORMAT_ID
from ..domain.exceptions import FormatConfigurationError
from .currency_format import CurrencyFormatRule


class CurrencyFormatLoader:
    """Загружает список правил форматов из YAML файла."""

    def __init__(self, path: Optional[Path] = None):
        """
        Args:
            path: Путь к YAML (по умолчанию currency_formats.yaml рядом с модулем)
        """
        self.path = Path(path) if path is not None else CURRENCY_FORMATS_PATH

    def load(self) -> Tuple[List[CurrencyFormatRule], str]:
        """
        Загружает и валидирует правила.

        Returns:
            (правила в порядке объявления, id формата по умолчанию)

        Raises:
            FileNotFoundError: Если файл не найден
            FormatConfigurationError: Если структура или правило невалидны
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Файл форматов валют не найден: {self.path}")

        logger.debug(f"[CurrencyFormatLoader] Загрузка форматов из {self.path}")

        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict) or not isinstance(data.get("formats"), list):
            raise FormatConfigurationError(
                f"Ожидается ключ 'formats' со списком правил в {self.path}",
                component="CurrencyFormatLoader",
            )

        rules = []
        for index, raw in enumerate(data["formats"]):
            try:
                rules.append(CurrencyFormatRule(**raw))
            except (ValidationError, TypeError) as e:
                logger.error(f"[CurrencyFormatLoader] Невалидное правило #{index} в {self.path}")
                raise FormatConfigurationError(
                    f"Правило #{index} невалидно",
                    component="CurrencyFormatLoader",
                    original_error=e,
                ) from e

        default_id = data.get("default_format", DEFAULT_FORMAT_ID)
        logger.debug(f"[CurrencyFormatLoader] Загружено правил: {len(rules)}, по умолчанию: {default_id}")
        return rules, default_id
