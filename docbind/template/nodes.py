"""
AST-узлы шаблона.

Неизменяемая иерархия узлов. Каждый узел блока помнит исходный текст своих
маркеров, поэтому любой узел можно вернуть в исходный вид без потерь:
проходы, обрабатывающие только часть конструкций, оставляют остальные как есть.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .placeholders import PlaceholderExpression


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Обычный текстовый контент в шаблоне.

    Включает и «сломанные» маркеры, для которых не нашлось пары.
    """
    text: str


@dataclass(frozen=True)
class VariableNode(TemplateNode):
    """Плейсхолдер {{ expr }}."""
    expression: PlaceholderExpression
    source: str


@dataclass(frozen=True)
class ConditionalNode(TemplateNode):
    """Условный блок [[cond]]...[[end:cond]]."""
    condition: str
    body: List[TemplateNode]
    open_source: str
    close_source: str


@dataclass(frozen=True)
class RepeaterNode(TemplateNode):
    """Повторитель <<add_more path>>...<<end:add_more>>."""
    path: str
    body: List[TemplateNode]
    open_source: str
    close_source: str


# Алиас для списка узлов (AST)
TemplateAST = List[TemplateNode]


def to_source(ast: TemplateAST) -> str:
    """Восстанавливает исходный текст шаблона по AST."""
    parts: List[str] = []
    for node in ast:
        if isinstance(node, TextNode):
            parts.append(node.text)
        elif isinstance(node, VariableNode):
            parts.append(node.source)
        elif isinstance(node, (ConditionalNode, RepeaterNode)):
            parts.append(node.open_source)
            parts.append(to_source(node.body))
            parts.append(node.close_source)
    return "".join(parts)


__all__ = [
    "TemplateNode",
    "TextNode",
    "VariableNode",
    "ConditionalNode",
    "RepeaterNode",
    "TemplateAST",
    "to_source",
]
