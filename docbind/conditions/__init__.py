"""
Условия условных блоков шаблона: модель, парсер и вычислитель.
"""

from __future__ import annotations

from .model import Condition, ConditionType
from .parser import ConditionParser
from .evaluator import ConditionEvaluator, evaluate_condition_string

__all__ = [
    "Condition",
    "ConditionType",
    "ConditionParser",
    "ConditionEvaluator",
    "evaluate_condition_string",
]
