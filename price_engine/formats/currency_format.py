"""
Правило формата валюты.

Одно правило на валюту: символы, ISO коды, локаль, токены разделителей
и позиция символа. Токены разделителей хранятся как есть и проверяются
при построении паттерна.
"""

import re
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

SYMBOL_POSITIONS = ("before", "after", "between", "none")


class CurrencyFormatRule(BaseModel):
    """Формат валюты (USD, EUR, ...)."""

    id: str = Field(..., description="Идентификатор правила (обычно ISO код)")
    symbols: Tuple[str, ...] = Field(default_factory=tuple, description="Символы ($, €, zł)")
    codes: Tuple[str, ...] = Field(default_factory=tuple, description="ISO коды (USD, EUR)")
    locale_id: str = Field("en-US", description="Локаль по умолчанию для формата")
    thousands: str = Field("commas", description='"commas" или "spacesAndDots"')
    decimal: str = Field("dot", description='"dot" или "comma"')
    symbol_position: str = Field("before", description='"before", "after", "between" или "none"')

    model_config = ConfigDict(frozen=True)

    @field_validator("symbol_position")
    @classmethod
    def validate_symbol_position(cls, v):
        if v not in SYMBOL_POSITIONS:
            raise ValueError(f"symbol_position должен быть одним из {SYMBOL_POSITIONS}, получено: {v}")
        return v

    @field_validator("symbols", "codes")
    @classmethod
    def validate_tokens(cls, v):
        if any(not token or token != token.strip() for token in v):
            raise ValueError(f"Пустой символ/код или пробелы по краям: {v}")
        return v

    @field_validator("codes")
    @classmethod
    def validate_codes(cls, v):
        for code in v:
            if not re.fullmatch(r"[A-Z]{3}", code):
                raise ValueError(f"Код валюты должен состоять из трёх заглавных латинских букв: {code}")
        return v

    @property
    def primary_code(self) -> str:
        return self.codes[0] if self.codes else self.id

    @property
    def prefixable_symbols(self) -> Tuple[str, ...]:
        """Символы без латинских букв: допускают префикс страны (US$, EU€)."""
        return tuple(s for s in self.symbols if not _LATIN.search(s))

    def with_delimiters(self, thousands: str, decimal: str) -> "CurrencyFormatRule":
        """Копия правила с другими разделителями и собственным id (для кеша паттернов)."""
        if thousands == self.thousands and decimal == self.decimal:
            return self
        return self.model_copy(
            update={"id": f"{self.id}:{thousands}:{decimal}", "thousands": thousands, "decimal": decimal}
        )


_LATIN = re.compile(r"[A-Za-z]")


def bounded_token(token: str) -> str:
    """
    Экранированный символ/код с границами слова по латинским буквам.

    "kr" не должен находиться внутри "Ukraine", а "$" может стоять
    вплотную к чему угодно.
    """
    escaped = re.escape(token)
    if _LATIN.match(token[0]):
        escaped = r"(?<![A-Za-z])" + escaped
    if _LATIN.match(token[-1]):
        escaped = escaped + r"(?![A-Za-z])"
    return escaped
