"""Паттерны цен: разделители, компилятор, кеш, поиск в тексте."""
