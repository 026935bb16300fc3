"""
DTO контракт: нормализованная цена, результат работы движка.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NormalizedPrice(BaseModel):
    """Сумма в минорных единицах (центах) и ISO код валюты."""

    amount_cents: int = Field(..., description="Сумма в минорных единицах")
    currency_code: str = Field(..., description="ISO код валюты (USD, EUR)")

    model_config = ConfigDict(frozen=True)

    @field_validator("amount_cents")
    @classmethod
    def validate_amount(cls, v: int) -> int:
        if v < 0:
            raise ValueError("amount_cents не может быть отрицательным")
        return v
