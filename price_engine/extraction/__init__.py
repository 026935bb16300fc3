"""
Конвейер распознавания цены: 5 проходов и координатор.
"""
