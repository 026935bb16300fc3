"""Доменный слой: модели, интерфейсы и исключения движка."""
