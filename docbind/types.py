from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union


# ---- Aliases for clarity ----
JsonValue = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]
Scope = Dict[str, Any]  # корневой контекст данных или производный скоуп элемента повторителя

# Зарезервированные ключи скоупов, порождённых повторителем
INDEX_KEY = "_index"
LENGTH_KEY = "_length"
VALUE_KEY = "value"


class _Missing:
    """
    Маркер «путь не разрешился».

    Отличается от None: null в данных — это определённое значение,
    а отсутствующий ключ — нет. Разница важна для условий вида `path.no`.
    """
    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


# -----------------------------
@dataclass(frozen=True)
class RenderOptions:
    # Значение для {{company_name}}, подставляемое до общего разрешения
    company_name: Optional[str] = None
    # Дополнительные члены архива (glob-шаблоны), обрабатываемые если есть
    extra_members: tuple = ("word/header*.xml", "word/footer*.xml")


__all__ = [
    "JsonValue",
    "Scope",
    "INDEX_KEY",
    "LENGTH_KEY",
    "VALUE_KEY",
    "MISSING",
    "RenderOptions",
]
