"""
Модели данных для системы условий.

Содержит классы для представления условий условных блоков шаблона.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ConditionType(Enum):
    """Типы условий в системе."""
    SENTINEL = "sentinel"
    PATH = "path"
    NEGATION = "negation"
    COMPARISON = "comparison"
    AND = "and"
    OR = "or"


# Условия, которые смотрят на служебные ключи скоупа повторителя
SENTINELS = ("count1", "count2", "common")

NEGATION_SUFFIX = ".no"


@dataclass
class Condition(ABC):
    """Базовый абстрактный класс для всех условий."""

    @abstractmethod
    def get_type(self) -> ConditionType:
        """Возвращает тип условия."""
        pass

    def __str__(self) -> str:
        """Строковое представление условия."""
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        """Внутренний метод для создания строкового представления."""
        pass


@dataclass
class SentinelCondition(Condition):
    """
    Условие скоупа повторителя.

    - count1: в массиве ровно один элемент
    - count2: всегда истинно (маркер блоков «для двух и более»)
    - common: текущий элемент первый
    """
    name: str

    def get_type(self) -> ConditionType:
        return ConditionType.SENTINEL

    def _to_string(self) -> str:
        return self.name


@dataclass
class PathCondition(Condition):
    """Истинность значения по пути."""
    path: str

    def get_type(self) -> ConditionType:
        return ConditionType.PATH

    def _to_string(self) -> str:
        return self.path


@dataclass
class NegationCondition(Condition):
    """
    Условие `path.no`.

    Если `path.no` — реальное поле данных, используется его значение.
    Иначе это отрицание истинности `path`.
    """
    path: str  # полный путь, включая суффикс .no

    @property
    def negated_path(self) -> str:
        return self.path[: -len(NEGATION_SUFFIX)]

    def get_type(self) -> ConditionType:
        return ConditionType.NEGATION

    def _to_string(self) -> str:
        return self.path


@dataclass
class ComparisonCondition(Condition):
    """Числовое сравнение `left > right`."""
    left: str
    right: str

    def get_type(self) -> ConditionType:
        return ConditionType.COMPARISON

    def _to_string(self) -> str:
        return f"{self.left} > {self.right}"


@dataclass
class CompositeCondition(Condition):
    """
    Одноуровневая композиция `a and b and c` или `a or b`.

    Смешивать `and` и `or` в одном выражении нельзя: при наличии `and`
    строка делится по нему, и термы с `or` остаются простыми путями.
    """
    operator: ConditionType  # AND или OR
    terms: List[Condition] = field(default_factory=list)

    def get_type(self) -> ConditionType:
        return self.operator

    def _to_string(self) -> str:
        return f" {self.operator.value} ".join(str(term) for term in self.terms)


__all__ = [
    "ConditionType",
    "SENTINELS",
    "NEGATION_SUFFIX",
    "Condition",
    "SentinelCondition",
    "PathCondition",
    "NegationCondition",
    "ComparisonCondition",
    "CompositeCondition",
]
