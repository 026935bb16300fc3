"""
Нормализация кандидата в сумму в минорных единицах.

"2,500,000" (commas) -> 250000000
"1.234,5" (spacesAndDots/comma) -> 123450

Вычисления через Decimal, без двоичной плавающей точки.
"""

import re
from decimal import Decimal, InvalidOperation

from loguru import logger

from ..contracts.detection_dto import NormalizedPrice
from ..domain.exceptions import NormalizationError, UnrecognizedDelimiterError
from ..domain.models import ExtractionCandidate
from ..patterns.delimiters import strip_thousands

_CANONICAL = re.compile(r"^\d+(?:\.\d{1,2})?$")
_ISO_CODE = re.compile(r"^[A-Z]{3}$")


class PriceNormalizer:
    """
    Элемент-функция: ExtractionCandidate -> NormalizedPrice.

    Код валюты разрешается через реестр: символ важнее кода.
    """

    def __init__(self, registry):
        self.registry = registry

    def normalize(self, candidate: ExtractionCandidate) -> NormalizedPrice:
        """
        Raises:
            NormalizationError: Невалидная сумма или неизвестная валюта
        """
        integer = (candidate.integer_part or "").strip()
        fraction = (candidate.fraction_part or "").strip()

        if candidate.thousands:
            try:
                integer = strip_thousands(integer, candidate.thousands)
            except UnrecognizedDelimiterError as e:
                raise NormalizationError(
                    f"Неизвестный разделитель тысяч у кандидата '{candidate.raw_text}'",
                    component="PriceNormalizer",
                    original_error=e,
                ) from e

        canonical = f"{integer}.{fraction}" if fraction else integer
        if not _CANONICAL.match(canonical):
            raise NormalizationError(
                f"Невалидная сумма '{canonical}' (из '{candidate.raw_text}')",
                component="PriceNormalizer",
            )

        try:
            amount_cents = int((Decimal(canonical) * 100).to_integral_value())
        except InvalidOperation as e:
            raise NormalizationError(
                f"Не удалось разобрать сумму '{canonical}'",
                component="PriceNormalizer",
                original_error=e,
            ) from e

        currency_code = self.registry.resolve_currency_code(candidate.currency_symbol, candidate.currency_code)
        if currency_code is None and candidate.currency_code and _ISO_CODE.match(candidate.currency_code):
            # Валюта из настроек, которой нет в реестре
            currency_code = candidate.currency_code
        if currency_code is None:
            raise NormalizationError(
                f"Не удалось определить валюту для '{candidate.raw_text}' "
                f"(символ={candidate.currency_symbol!r}, код={candidate.currency_code!r})",
                component="PriceNormalizer",
            )

        logger.debug(f"[PriceNormalizer] '{candidate.raw_text}' -> {amount_cents} {currency_code}")
        return NormalizedPrice(amount_cents=amount_cents, currency_code=currency_code)
