"""Прикладной слой: фабрика компонентов и публичные функции."""
