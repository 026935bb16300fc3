"""
Исключения движка распознавания цен.

Конфигурационные ошибки (разделители, дубликаты символов) фатальны для
конкретного вызова и всегда пробрасываются наверх. Ошибки нормализации
перехватываются координатором: кандидат отбрасывается, конвейер продолжает.
"""


class PriceEngineError(Exception):
    """Базовое исключение движка."""

    def __init__(self, message: str, component: str = None, original_error: Exception = None):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Price Engine Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class FormatConfigurationError(PriceEngineError):
    """Ошибка конфигурации формата валюты."""
    pass


class UnrecognizedDelimiterError(FormatConfigurationError):
    """Неизвестный токен разделителя тысяч или дроби."""

    def __init__(self, token, kind: str):
        self.token = token
        self.kind = kind
        super().__init__(
            f"Неизвестный токен разделителя ({kind}): {token!r}",
            component="PatternCompiler",
        )


class DuplicateSymbolError(FormatConfigurationError):
    """Символ или код уже закреплён за другим форматом."""

    def __init__(self, token: str, existing_id: str, new_id: str):
        self.token = token
        self.existing_id = existing_id
        self.new_id = new_id
        super().__init__(
            f"'{token}' уже зарегистрирован для формата {existing_id}, конфликт с {new_id}",
            component="CurrencyFormatRegistry",
        )


class NormalizationError(PriceEngineError):
    """Кандидат не удалось привести к сумме в минорных единицах."""
    pass


class SiteHandlerError(PriceEngineError):
    """Ошибка внутри обработчика конкретного сайта."""
    pass
