"""Чтение DOM: атрибуты и сборка текста из дочерних элементов."""
