"""
DTO контракт: пользовательские настройки извлечения.

Приходит от внешнего слоя конфигурации (хранилище настроек расширения),
поэтому принимает и camelCase-ключи: {"currencySymbol": "$", ...}.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """
    Настройки одного вызова extract_price / find_prices.

    Токены разделителей здесь намеренно не проверяются: неизвестный токен
    обнаруживается при построении паттерна (UnrecognizedDelimiterError).
    """

    currency_symbol: str = Field("$", alias="currencySymbol", description="Символ валюты ($, €, zł)")
    currency_code: str = Field("USD", alias="currencyCode", description="ISO код валюты")
    thousands: Optional[str] = Field(
        "commas", description='Токен разделителя тысяч: "commas" или "spacesAndDots"'
    )
    decimal: Optional[str] = Field("dot", description='Токен разделителя дроби: "dot" или "comma"')
    is_reverse_search: bool = Field(
        False, alias="isReverseSearch", description="Искать уже аннотированные цены"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)
