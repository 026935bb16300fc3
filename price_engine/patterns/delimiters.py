"""
Токены разделителей -> фрагменты регулярных выражений.

Неизвестный токен - ошибка конфигурации, она не подавляется.
"""

from ..domain.exceptions import UnrecognizedDelimiterError

THOUSANDS_TOKENS = {
    "commas": r",",
    "spacesAndDots": r"[\s.]",
}

DECIMAL_TOKENS = {
    "dot": r"\.",
    "comma": r",",
}


def build_thousands_string(token: str) -> str:
    """commas -> ",", spacesAndDots -> пробел (включая NBSP) или точка."""
    try:
        return THOUSANDS_TOKENS[token]
    except (KeyError, TypeError):
        raise UnrecognizedDelimiterError(token, "thousands") from None


def build_decimal_string(token: str) -> str:
    """dot -> ".", comma -> ","."""
    try:
        return DECIMAL_TOKENS[token]
    except (KeyError, TypeError):
        raise UnrecognizedDelimiterError(token, "decimal") from None


def strip_thousands(integer_part: str, token: str) -> str:
    """Удаляет разделители тысяч из целой части по токену."""
    if token == "commas":
        return integer_part.replace(",", "")
    if token == "spacesAndDots":
        return "".join(ch for ch in integer_part if ch != "." and not ch.isspace())
    raise UnrecognizedDelimiterError(token, "thousands")
