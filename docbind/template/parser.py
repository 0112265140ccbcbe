"""
Синтаксический анализатор шаблонов.

Грамматика:
template    → (text | variable | conditional | repeater)*
conditional → CONDITION_OPEN template CONDITION_CLOSE   (имена совпадают буквально)
repeater    → REPEATER_OPEN template REPEATER_CLOSE

Разбор идёт в два линейных прохода по токенам. Первый сопоставляет
открывающие и закрывающие маркеры через стек, второй строит AST по найденным
парам. Парсер никогда не бросает исключений на некорректном шаблоне: маркер
без пары становится текстом. Закрывающий маркер объемлющего блока прерывает
незакрытые вложенные блоки, и они тоже остаются текстом.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .lexer import tokenize_template
from .nodes import ConditionalNode, RepeaterNode, TemplateAST, TemplateNode, TextNode, VariableNode
from .placeholders import parse_placeholder
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

_OPENERS = (TokenType.CONDITION_OPEN, TokenType.REPEATER_OPEN)
_CLOSERS = (TokenType.CONDITION_CLOSE, TokenType.REPEATER_CLOSE)

# Лишние символы вокруг пути повторителя: <<add_more = "items">>
_PATH_LEADING_JUNK = re.compile(r"^[=>\s\"']+")
_PATH_TRAILING_JUNK = re.compile(r"[\"'\s]+$")


def clean_repeater_path(raw: str) -> str:
    """Снимает пробелы, `=`, `>` и кавычки по краям пути повторителя."""
    path = _PATH_LEADING_JUNK.sub("", raw.strip())
    return _PATH_TRAILING_JUNK.sub("", path).strip()


def _closes(opener: Token, closer: Token) -> bool:
    """Закрывает ли маркер closer блок, открытый opener."""
    if opener.type == TokenType.CONDITION_OPEN:
        return closer.type == TokenType.CONDITION_CLOSE and closer.payload == opener.payload
    return closer.type == TokenType.REPEATER_CLOSE


@dataclass
class _Frame:
    """Открытый блок при построении AST."""
    opener: Optional[Token]
    nodes: List[TemplateNode] = field(default_factory=list)


class TemplateParser:
    """
    Парсер шаблонов.

    Преобразует список токенов в AST за линейное время и без рекурсии,
    поэтому длинные документы с множеством незакрытых маркеров разбираются
    так же быстро, как корректные.
    """

    def __init__(self, tokens: List[Token]):
        self._tokens = tokens

    def parse(self) -> TemplateAST:
        """
        Парсит токены в AST.

        Returns:
            Список узлов верхнего уровня
        """
        pairs = self._match_markers()
        nodes = self._build(pairs)
        logger.debug(f"Parsed template AST with {len(nodes)} top-level nodes")
        return nodes

    def _match_markers(self) -> Dict[int, int]:
        """
        Сопоставляет маркеры блоков.

        Закрывающий маркер ищет ближайший подходящий открытый блок в стеке.
        Блоки над найденным остаются незакрытыми; маркер, которому нет пары
        в стеке, становится текстом.

        Returns:
            Индекс открывающего токена -> индекс закрывающего (и обратно)
        """
        pairs: Dict[int, int] = {}
        stack: List[int] = []

        for idx, token in enumerate(self._tokens):
            if token.type in _OPENERS:
                stack.append(idx)
                continue
            if token.type not in _CLOSERS:
                continue

            for depth in range(len(stack) - 1, -1, -1):
                if _closes(self._tokens[stack[depth]], token):
                    for unclosed in stack[depth + 1:]:
                        self._log_unterminated(unclosed)
                    opener = stack[depth]
                    del stack[depth:]
                    pairs[opener] = idx
                    pairs[idx] = opener
                    break

        for unclosed in stack:
            self._log_unterminated(unclosed)
        return pairs

    def _build(self, pairs: Dict[int, int]) -> TemplateAST:
        """Строит AST по найденным парам маркеров."""
        frames: List[_Frame] = [_Frame(opener=None)]

        for idx, token in enumerate(self._tokens):
            if token.type == TokenType.EOF:
                break

            if idx in pairs and token.type in _OPENERS:
                frames.append(_Frame(opener=token))
                continue

            if idx in pairs and token.type in _CLOSERS:
                frame = frames.pop()
                frames[-1].nodes.append(self._block(frame, token))
                continue

            if token.type == TokenType.VARIABLE:
                frames[-1].nodes.append(
                    VariableNode(expression=parse_placeholder(token.payload), source=token.value)
                )
                continue

            # Текст, осиротевший закрывающий маркер или незакрытый открывающий
            self._append_text(frames[-1].nodes, token.value)

        return frames[0].nodes

    @staticmethod
    def _block(frame: _Frame, close: Token) -> TemplateNode:
        opener = frame.opener
        if opener.type == TokenType.CONDITION_OPEN:
            return ConditionalNode(
                condition=opener.payload.strip(),
                body=frame.nodes,
                open_source=opener.value,
                close_source=close.value,
            )
        return RepeaterNode(
            path=clean_repeater_path(opener.payload),
            body=frame.nodes,
            open_source=opener.value,
            close_source=close.value,
        )

    def _log_unterminated(self, idx: int) -> None:
        token = self._tokens[idx]
        logger.debug(f"Unterminated marker {token.value!r} at {token.line}:{token.column} left as text")

    @staticmethod
    def _append_text(nodes: List[TemplateNode], text: str) -> None:
        """Добавляет текст, объединяя его с предыдущим TextNode если возможно."""
        if nodes and isinstance(nodes[-1], TextNode):
            nodes[-1] = TextNode(text=nodes[-1].text + text)
        else:
            nodes.append(TextNode(text=text))


def parse_template(text: str) -> TemplateAST:
    """Токенизирует и парсит текст шаблона."""
    return TemplateParser(tokenize_template(text)).parse()


__all__ = ["TemplateParser", "parse_template", "clean_repeater_path"]
