"""
Лексические типы.

Определяет типы токенов шаблона: обычный текст и маркеры трёх конструкций
(плейсхолдеры, условные блоки, повторители).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""
    TEXT = "TEXT"
    VARIABLE = "VARIABLE"                    # {{ expr }}
    CONDITION_OPEN = "CONDITION_OPEN"        # [[ cond ]]
    CONDITION_CLOSE = "CONDITION_CLOSE"      # [[end:cond]]
    REPEATER_OPEN = "REPEATER_OPEN"          # <<add_more path>>
    REPEATER_CLOSE = "REPEATER_CLOSE"        # <<end:add_more>>
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией.

    `value` — исходный текст маркера целиком, `payload` — его содержимое
    (выражение плейсхолдера, текст условия, путь повторителя).
    """
    type: TokenType
    value: str
    payload: str
    position: int        # Позиция в исходном тексте
    line: int           # Номер строки (начиная с 1)
    column: int         # Номер колонки (начиная с 1)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = ["TokenType", "Token"]
