"""
Доступ к данным в контексте шаблона.

Разрешение путей вида `a.b`, `a[3]`, `a[]`, построение дочерних скоупов
повторителей и правила истинности/числового приведения значений.
Модуль не изменяет переданные структуры данных.
"""

from __future__ import annotations

import math
import re
from typing import Any, Mapping

from .types import INDEX_KEY, LENGTH_KEY, MISSING, VALUE_KEY, Scope

_INDEXED_SEGMENT = re.compile(r"^(\w+)\[(\d+)\]$")
_ITERATED_SEGMENT = re.compile(r"^(\w+)\[\]$")
_EMPTY_BRACKETS = re.compile(r"\[\]")
_NUMERIC_LITERAL = re.compile(
    r"^[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|Infinity)$"
)
_HEX_LITERAL = re.compile(r"^0[xX][0-9a-fA-F]+$")


def _child(container: Any, key: str) -> Any:
    """Один шаг спуска: ключ словаря или числовой индекс списка."""
    if isinstance(container, Mapping):
        return container.get(key, MISSING)
    if isinstance(container, list) and key.isdigit():
        idx = int(key)
        return container[idx] if idx < len(container) else MISSING
    return MISSING


def deep_get(obj: Any, path: str) -> Any:
    """
    Возвращает значение по точечному пути или MISSING.

    Ключ, буквально совпадающий со всем путём (например "agent.no"),
    имеет приоритет над обходом по точкам. Сегмент `name[]` отдаёт
    сам массив, `name[3]` — его элемент.
    """
    if not path:
        return MISSING

    if isinstance(obj, Mapping) and path in obj:
        return obj[path]

    cur = obj
    for part in path.split("."):
        if cur is MISSING or cur is None:
            return MISSING

        indexed = _INDEXED_SEGMENT.match(part)
        if indexed:
            seq = _child(cur, indexed.group(1))
            if not isinstance(seq, list):
                return MISSING
            idx = int(indexed.group(2))
            cur = seq[idx] if idx < len(seq) else MISSING
            continue

        iterated = _ITERATED_SEGMENT.match(part)
        if iterated:
            cur = _child(cur, iterated.group(1))
            continue

        cur = _child(cur, part)

    return cur


def resolve_path(scope: Scope, path: str) -> Any:
    """
    Разрешение пути для подстановки переменной.

    Пустые скобки вне повторителя означают «первый элемент массива»:
    `items[].name` читается как `items[0].name`.
    """
    if "[]" in path:
        return deep_get(scope, _EMPTY_BRACKETS.sub("[0]", path))
    return deep_get(scope, path)


def derive_child_scope(parent: Scope, item: Any, index: int, length: int) -> Scope:
    """
    Строит скоуп для одного элемента повторителя.

    Родительский скоуп копируется поверхностно и никогда не изменяется.
    Поля объекта-элемента перекрывают родительские ключи, прочие значения
    доступны под ключом `value`.
    """
    child: Scope = dict(parent)
    if isinstance(item, Mapping):
        child.update(item)
    else:
        child[VALUE_KEY] = item
    child[INDEX_KEY] = index
    child[LENGTH_KEY] = length
    return child


def is_truthy(value: Any) -> bool:
    """
    Истинность значения в терминах шаблонов документов.

    Ложны: MISSING, None, False, 0, NaN и пустая строка.
    Любой список и любой объект (даже пустые) истинны.
    """
    if value is MISSING or value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return not (value == 0 or math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def to_number(value: Any) -> float:
    """
    Числовое приведение значения; нечисловое даёт NaN.

    Пустая строка и None приводятся к нулю, булевы — к 0/1.
    """
    if value is MISSING:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if _HEX_LITERAL.match(text):
            return float(int(text, 16))
        if _NUMERIC_LITERAL.match(text):
            return float(text.replace("Infinity", "inf"))
        return math.nan
    if isinstance(value, list):
        if not value:
            return 0.0
        if len(value) == 1 and not isinstance(value[0], (list, Mapping)):
            return to_number(value[0])
    return math.nan


__all__ = [
    "deep_get",
    "resolve_path",
    "derive_child_scope",
    "is_truthy",
    "to_number",
]
