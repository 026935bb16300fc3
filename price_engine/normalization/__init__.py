"""Нормализация цен."""
