"""
Основной процессор шаблонов.

Вычисляет AST шаблона в скоупе данных. Порядок обработки фиксирован:
повторители, затем условные блоки, затем плейсхолдеры. Внутри тела
раскрытого блока всегда применяются все три конструкции. Отдельный проход
раскрывает только свои конструкции: маркеры чужих условных блоков
сохраняются, а их содержимое обрабатывается тем же проходом; нераскрытый
повторитель воспроизводится целиком в исходном виде.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import List

from .nodes import (
    ConditionalNode,
    RepeaterNode,
    TemplateAST,
    TemplateNode,
    TextNode,
    VariableNode,
    to_source,
)
from .parser import parse_template
from ..conditions.evaluator import ConditionEvaluator
from ..conditions.parser import ConditionParser
from ..formatting import escape_markup, format_value
from ..scope import deep_get, derive_child_scope, resolve_path
from ..types import Scope

logger = logging.getLogger(__name__)


class Constructs(enum.Flag):
    """Конструкции, которые раскрываются на верхнем уровне прохода."""
    REPEATERS = enum.auto()
    CONDITIONALS = enum.auto()
    VARIABLES = enum.auto()
    ALL = REPEATERS | CONDITIONALS | VARIABLES


class TemplateProcessor:
    """
    Вычислитель AST шаблона.

    Не хранит состояния между вызовами: скоупы передаются явно,
    дочерние скоупы — копии родительских.
    """

    def __init__(self):
        self.condition_parser = ConditionParser()

    def process_text(self, text: str, scope: Scope, constructs: Constructs = Constructs.ALL) -> str:
        """
        Парсит и вычисляет текст шаблона.

        Args:
            text: Текст шаблона
            scope: Контекст данных
            constructs: Какие конструкции раскрывать на верхнем уровне

        Returns:
            Текст с подставленными значениями
        """
        return self.evaluate(parse_template(text), scope, constructs)

    def evaluate(self, ast: TemplateAST, scope: Scope, constructs: Constructs = Constructs.ALL) -> str:
        """Вычисляет AST и возвращает отрендеренный текст."""
        return "".join(self._evaluate_node(node, scope, constructs) for node in ast)

    def _evaluate_node(self, node: TemplateNode, scope: Scope, constructs: Constructs) -> str:
        """Вычисляет один узел AST."""
        if isinstance(node, TextNode):
            return node.text

        if isinstance(node, RepeaterNode):
            if Constructs.REPEATERS in constructs:
                return self._evaluate_repeater(node, scope)
            # Тело повторителя имеет смысл только в скоупе элемента
            return to_source([node])

        if isinstance(node, ConditionalNode):
            if Constructs.CONDITIONALS in constructs:
                return self._evaluate_conditional(node, scope)
            # Маркеры остаются, содержимое обрабатывается тем же проходом
            return node.open_source + self.evaluate(node.body, scope, constructs) + node.close_source

        if isinstance(node, VariableNode):
            if Constructs.VARIABLES in constructs:
                return self._evaluate_variable(node, scope)
            return node.source

        logger.warning(f"No processor found for node type: {type(node).__name__}")
        return ""

    def _evaluate_repeater(self, node: RepeaterNode, scope: Scope) -> str:
        """
        Повторяет тело для каждого элемента массива.

        Путь, не указывающий на массив, убирает блок целиком.
        """
        items = deep_get(scope, node.path)
        if not isinstance(items, list):
            logger.debug(f"Repeater path '{node.path}' is not an array, block removed")
            return ""

        parts: List[str] = []
        for index, item in enumerate(items):
            child = derive_child_scope(scope, item, index, len(items))
            parts.append(self.evaluate(node.body, child))
        return "".join(parts)

    def _evaluate_conditional(self, node: ConditionalNode, scope: Scope) -> str:
        """
        Раскрывает тело блока, если условие истинно.

        Пробельные символы непосредственно перед закрывающим маркером
        в вывод не попадают.
        """
        condition = self.condition_parser.parse(node.condition)
        if not ConditionEvaluator(scope).evaluate(condition):
            logger.debug(f"Condition '{node.condition}' is false, block suppressed")
            return ""
        return self.evaluate(_strip_trailing_whitespace(node.body), scope)

    def _evaluate_variable(self, node: VariableNode, scope: Scope) -> str:
        """Подставляет отформатированное значение плейсхолдера."""
        expression = node.expression
        value = resolve_path(scope, expression.path)
        return format_value(value, expression.prefixes, expression.rule)


def _strip_trailing_whitespace(body: TemplateAST) -> TemplateAST:
    """Убирает хвостовые пробелы последнего текстового узла тела."""
    if not body or not isinstance(body[-1], TextNode):
        return body
    stripped = body[-1].text.rstrip()
    if stripped:
        return body[:-1] + [TextNode(text=stripped)]
    return body[:-1]


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #

def resolve_repeaters(text: str, scope: Scope) -> str:
    """Раскрывает повторители верхнего уровня (тела вычисляются полностью)."""
    return TemplateProcessor().process_text(text, scope, Constructs.REPEATERS)


def resolve_conditionals(text: str, scope: Scope) -> str:
    """Раскрывает условные блоки верхнего уровня (тела вычисляются полностью)."""
    return TemplateProcessor().process_text(text, scope, Constructs.CONDITIONALS)


def resolve_variables(text: str, scope: Scope) -> str:
    """Подставляет плейсхолдеры верхнего уровня."""
    return TemplateProcessor().process_text(text, scope, Constructs.VARIABLES)


def resolve_template(text: str, scope: Scope) -> str:
    """
    Полное разрешение шаблона: повторители, условия, плейсхолдеры.

    Выполняется за один разбор, подставленные значения повторно не сканируются.
    """
    return TemplateProcessor().process_text(text, scope)


def replace_simple_placeholder(text: str, key: str, value: str) -> str:
    """
    Заменяет каждый `{{ key }}` экранированным значением.

    Работает до общего разрешения, без учёта префиксов и правил.
    """
    pattern = re.compile(r"\{\{\s*" + re.escape(key) + r"\s*\}\}")
    replacement = escape_markup(value)
    return pattern.sub(lambda _m: replacement, text)


__all__ = [
    "Constructs",
    "TemplateProcessor",
    "resolve_repeaters",
    "resolve_conditionals",
    "resolve_variables",
    "resolve_template",
    "replace_simple_placeholder",
]
