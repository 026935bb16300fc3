"""
Кеш скомпилированных паттернов.

Принадлежит экземпляру CurrencyFormatRegistry, глобального состояния нет.
Построение паттерна идемпотентно: при одновременном первом обращении
лишняя сборка просто выбрасывается, в кеше остаётся первая вставка.
"""

import threading
from typing import Any, Callable, Dict, Hashable


class PatternCache:
    """Потокобезопасный кеш insert-if-absent."""

    def __init__(self):
        self._entries: Dict[Hashable, Any] = {}
        self._lock = threading.Lock()

    def get_or_build(self, key: Hashable, builder: Callable[[], Any]) -> Any:
        entry = self._entries.get(key)
        if entry is not None:
            return entry
        built = builder()
        with self._lock:
            return self._entries.setdefault(key, built)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
