"""
Парсер условных выражений.

Грамматика (без приоритетов и скобок):
expression → term ((" and " | " or ") term)*     (один и тот же оператор)
term       → "count1" | "count2" | "common"
           | PATH ".no"
           | PATH " > " PATH
           | PATH

Если в строке есть ` and `, термы разделяются по нему, иначе по ` or `.
Терм, содержащий другой оператор, не разбирается дальше и трактуется как путь.
"""

from __future__ import annotations

from typing import List, Optional

from .model import (
    SENTINELS,
    NEGATION_SUFFIX,
    Condition,
    ConditionType,
    SentinelCondition,
    PathCondition,
    NegationCondition,
    ComparisonCondition,
    CompositeCondition,
)

_AND = " and "
_OR = " or "
_GREATER = " > "


class ConditionParser:
    """
    Парсер условных выражений.

    Не бросает исключений: любая строка является корректным условием,
    в худшем случае — путём, который не разрешится.
    """

    def parse(self, condition_str: str) -> Condition:
        """
        Парсит строку условия в AST.

        Args:
            condition_str: Строка условного выражения (пробелы по краям игнорируются)

        Returns:
            Корневой узел AST
        """
        text = condition_str.strip()

        operator = self._find_operator(text)
        if operator is None:
            return self._parse_term(text)

        keyword = _AND if operator == ConditionType.AND else _OR
        terms: List[Condition] = [self._parse_term(part.strip()) for part in text.split(keyword)]
        return CompositeCondition(operator=operator, terms=terms)

    @staticmethod
    def _find_operator(text: str) -> Optional[ConditionType]:
        """Определяет оператор: ` and ` проверяется раньше ` or `."""
        if _AND in text:
            return ConditionType.AND
        if _OR in text:
            return ConditionType.OR
        return None

    @staticmethod
    def _parse_term(term: str) -> Condition:
        """Парсит простое условие."""
        if term in SENTINELS:
            return SentinelCondition(name=term)

        if term.endswith(NEGATION_SUFFIX):
            return NegationCondition(path=term)

        if _GREATER in term:
            parts = term.split(_GREATER)
            return ComparisonCondition(left=parts[0].strip(), right=parts[1].strip())

        return PathCondition(path=term)


__all__ = ["ConditionParser"]
