"""
Вычислитель условных выражений.

Проходит по AST условий и вычисляет их значения в скоупе данных.
Неразрешённые пути ложны; ошибок вычисления не бывает.
"""

from __future__ import annotations

from typing import Any, cast

from .model import (
    Condition,
    ConditionType,
    SentinelCondition,
    PathCondition,
    NegationCondition,
    ComparisonCondition,
    CompositeCondition,
)
from ..scope import deep_get, is_truthy, to_number
from ..types import INDEX_KEY, LENGTH_KEY, MISSING, Scope


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConditionEvaluator:
    """
    Вычислитель условных выражений.

    Принимает AST условия и скоуп, возвращает булево значение.
    """

    def __init__(self, scope: Scope):
        """
        Инициализирует вычислитель со скоупом.

        Args:
            scope: Корневой контекст данных или скоуп элемента повторителя
        """
        self.scope = scope

    def evaluate(self, condition: Condition) -> bool:
        """
        Вычисляет значение условия.

        Args:
            condition: Корневой узел AST условия

        Returns:
            Булево значение результата вычисления
        """
        condition_type = condition.get_type()

        if condition_type == ConditionType.SENTINEL:
            return self._evaluate_sentinel(cast(SentinelCondition, condition))
        elif condition_type == ConditionType.NEGATION:
            return self._evaluate_negation(cast(NegationCondition, condition))
        elif condition_type == ConditionType.COMPARISON:
            return self._evaluate_comparison(cast(ComparisonCondition, condition))
        elif condition_type == ConditionType.AND:
            return all(self.evaluate(term) for term in cast(CompositeCondition, condition).terms)
        elif condition_type == ConditionType.OR:
            return any(self.evaluate(term) for term in cast(CompositeCondition, condition).terms)
        else:
            return is_truthy(deep_get(self.scope, cast(PathCondition, condition).path))

    def _evaluate_sentinel(self, condition: SentinelCondition) -> bool:
        """
        count1/count2/common.

        Вне повторителя служебных ключей нет, и count1/common ложны.
        """
        if condition.name == "count2":
            return True

        if condition.name == "count1":
            length = self.scope.get(LENGTH_KEY)
            return _is_number(length) and length == 1

        index = self.scope.get(INDEX_KEY)
        return _is_number(index) and index == 0

    def _evaluate_negation(self, condition: NegationCondition) -> bool:
        """
        Вычисляет `path.no`.

        Существующее поле `path.no` (в том числе буквальный ключ "path.no")
        решает само за себя, иначе — отрицание `path`.
        """
        value = deep_get(self.scope, condition.path)
        if value is not MISSING:
            return is_truthy(value)
        return not is_truthy(deep_get(self.scope, condition.negated_path))

    def _evaluate_comparison(self, condition: ComparisonCondition) -> bool:
        """
        Вычисляет `left > right`.

        Обе стороны разрешаются как пути. Литерал вроде `2` путём не является,
        даёт NaN, и сравнение с NaN всегда ложно.
        """
        left = to_number(deep_get(self.scope, condition.left))
        right = to_number(deep_get(self.scope, condition.right))
        return left > right


def evaluate_condition_string(condition_str: str, scope: Scope) -> bool:
    """
    Удобная функция для вычисления условия из строки.

    Args:
        condition_str: Строка условного выражения
        scope: Скоуп данных

    Returns:
        Результат вычисления условия
    """
    from .parser import ConditionParser

    parser = ConditionParser()
    ast = parser.parse(condition_str)

    evaluator = ConditionEvaluator(scope)
    return evaluator.evaluate(ast)


__all__ = ["ConditionEvaluator", "evaluate_condition_string"]
