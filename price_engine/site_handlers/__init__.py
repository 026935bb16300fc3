"""Обработчики разметки конкретных сайтов."""
