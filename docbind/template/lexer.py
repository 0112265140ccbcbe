"""
Лексический анализатор шаблонов.

Находит маркеры конструкций в тексте и разбивает его на последовательность
токенов. Всё, что не является маркером, становится TEXT. Лексер не знает
о вложенности: парность маркеров проверяет парсер.
"""

from __future__ import annotations

import re
from typing import List

from .tokens import Token, TokenType

# Маркеры закрытия проверяются раньше открывающих, иначе `[[end:x]]` станет условием "end:x".
# Повторители распознаются и в экранированном виде, в котором они лежат
# внутри текстовых узлов документа.
_MARKERS = re.compile(
    r"(?P<VARIABLE>\{\{\s*(?P<expr>.*?)\s*\}\})"
    r"|(?P<CONDITION_CLOSE>\[\[end:(?P<closed>.*?)\]\])"
    r"|(?P<CONDITION_OPEN>\[\[(?P<cond>.*?)\]\])"
    r"|(?P<REPEATER_CLOSE><<end:add_more>>|&lt;&lt;end:add_more&gt;&gt;)"
    r"|(?P<REPEATER_OPEN><<add_more(?P<path>.*?)>>|&lt;&lt;add_more(?P<escaped_path>.*?)&gt;&gt;)"
)

_PAYLOAD_GROUPS = {
    TokenType.VARIABLE: ("expr",),
    TokenType.CONDITION_CLOSE: ("closed",),
    TokenType.CONDITION_OPEN: ("cond",),
    TokenType.REPEATER_CLOSE: (),
    TokenType.REPEATER_OPEN: ("path", "escaped_path"),
}


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Разбивает исходный текст на токены, отслеживая строку и колонку
    каждого токена для диагностики.
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.
        Последний токен всегда EOF.
        """
        tokens: List[Token] = []

        for match in _MARKERS.finditer(self.text):
            if match.start() > self.position:
                tokens.append(self._make(TokenType.TEXT, self.text[self.position:match.start()], ""))

            token_type = TokenType[match.lastgroup]
            tokens.append(self._make(token_type, match.group(0), self._payload(match, token_type)))

        if self.position < len(self.text):
            tokens.append(self._make(TokenType.TEXT, self.text[self.position:], ""))

        tokens.append(Token(TokenType.EOF, "", "", self.position, self.line, self.column))
        return tokens

    @staticmethod
    def _payload(match: re.Match, token_type: TokenType) -> str:
        for group in _PAYLOAD_GROUPS[token_type]:
            value = match.group(group)
            if value is not None:
                return value
        return ""

    def _make(self, token_type: TokenType, value: str, payload: str) -> Token:
        """Создаёт токен в текущей позиции и продвигает позицию за него."""
        token = Token(token_type, value, payload, self.position, self.line, self.column)
        self._advance(value)
        return token

    def _advance(self, value: str) -> None:
        """Продвигает позицию, обновляя номер строки и колонки."""
        newlines = value.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(value) - value.rfind("\n")
        else:
            self.column += len(value)
        self.position += len(value)


def tokenize_template(text: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список токенов, заканчивающийся EOF
    """
    return TemplateLexer(text).tokenize()


__all__ = ["TemplateLexer", "tokenize_template"]
