"""
Быстрый префильтр текста перед паттерн-проходами.

Только оптимизация: координатор спрашивает его лишь тогда, когда
обработчики сайтов и атрибуты ничего не дали.
"""

import re

_DIGIT_SEPARATOR_DIGIT = re.compile(r"\d[.,\s]\d")


def might_contain_price(text: str, registry) -> bool:
    """
    Может ли в тексте быть цена.

    False, если в тексте нет цифр, либо нет ни известного символа/кода,
    ни формы "цифра разделитель цифра".
    """
    if not text or not any(ch.isdigit() for ch in text):
        return False
    if _DIGIT_SEPARATOR_DIGIT.search(text):
        return True
    return registry.detect_format_from_text(text) is not None
