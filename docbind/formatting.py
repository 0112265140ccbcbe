"""
Форматирование значений для подстановки в разметку.

Правило (`| uppercase`, `| date:dd/MM/yyyy`, ...) применяется к сырому значению,
затем префиксы плейсхолдера — в порядке, обратном их записи. Экранирование
разметки выполняется последним шагом, поэтому смена регистра не портит
ссылки на сущности вроде `&amp;`.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, List, Mapping, Optional
from xml.sax.saxutils import escape

import pendulum

from .jsonic import dumps_compact
from .scope import to_number
from .types import MISSING

logger = logging.getLogger(__name__)

DEFAULT_DATE_PATTERN = "yyyy-MM-dd"

_WORD_START = re.compile(r"\b\w")


def escape_markup(text: str) -> str:
    """Экранирует &, < и > (кавычки в текстовых узлах допустимы)."""
    return escape(text)


def stringify(value: Any) -> str:
    """
    Строковая форма скалярного значения.

    Булевы пишутся как true/false, целочисленные float — без дробной части.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def title_words(text: str) -> str:
    """Заглавная буква в начале каждого слова, остальное без изменений."""
    return _WORD_START.sub(lambda m: m.group(0).upper(), text)


# --------------------------------------------------------------------------- #
# Числа
# --------------------------------------------------------------------------- #

def format_number(text: str) -> Optional[str]:
    """
    Группировка разрядов и не более трёх знаков после запятой.

    Возвращает None, если значение не приводится к конечному числу.
    """
    number = to_number(text)
    if math.isnan(number) or math.isinf(number):
        return None
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


# --------------------------------------------------------------------------- #
# Даты
# --------------------------------------------------------------------------- #

# Символы полей даты (Unicode TR35) -> токены pendulum
_DATE_FIELDS = {
    "y": "YYYY", "yy": "YY", "yyy": "YYYY", "yyyy": "YYYY",
    "M": "M", "MM": "MM", "MMM": "MMM", "MMMM": "MMMM",
    "d": "D", "dd": "DD",
    "D": "DDD", "DD": "DDDD",
    "E": "ddd", "EE": "ddd", "EEE": "ddd", "EEEE": "dddd",
    "H": "H", "HH": "HH",
    "h": "h", "hh": "hh",
    "m": "m", "mm": "mm",
    "s": "s", "ss": "ss",
    "a": "A",
}


def _literal(text: str) -> str:
    return f"[{text}]" if text else ""


def translate_date_pattern(pattern: str) -> str:
    """
    Переводит шаблон вида `dd/MM/yyyy` или `do MMMM yyyy` в формат pendulum.

    Текст в одинарных кавычках выводится буквально, `''` — одиночная кавычка.

    Raises:
        ValueError: Неизвестный символ поля без экранирования
    """
    out: List[str] = []
    i = 0
    length = len(pattern)
    while i < length:
        ch = pattern[i]

        if ch == "'":
            end = i + 1
            chunk = []
            while end < length:
                if pattern[end] == "'":
                    if end + 1 < length and pattern[end + 1] == "'":
                        chunk.append("'")
                        end += 2
                        continue
                    break
                chunk.append(pattern[end])
                end += 1
            if chunk:
                out.append(_literal("".join(chunk)))
            elif end == i + 1:
                # '' вне кавычек
                out.append(_literal("'"))
            i = end + 1
            continue

        if ch.isalpha() and ch.isascii():
            end = i
            while end < length and pattern[end] == ch:
                end += 1
            run = pattern[i:end]
            # порядковый день месяца: "do" -> 1st, 2nd, ...
            if run == "d" and end < length and pattern[end] == "o":
                out.append("Do")
                i = end + 1
                continue
            token = _DATE_FIELDS.get(run)
            if token is None:
                raise ValueError(f"Unsupported date field '{run}' in pattern '{pattern}'")
            out.append(token)
            i = end
            continue

        out.append(_literal(ch) if ch in "[]" else ch)
        i += 1

    return "".join(out)


def format_date(text: str, pattern: Optional[str]) -> Optional[str]:
    """
    Разбирает ISO-дату и форматирует её по шаблону.

    Возвращает None, если строка не является датой или шаблон некорректен.
    """
    try:
        parsed = pendulum.parse(text)
        if not isinstance(parsed, pendulum.Date):
            return None
        return parsed.format(translate_date_pattern(pattern or DEFAULT_DATE_PATTERN))
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Date formatting of {text!r} failed: {e}")
        return None


# --------------------------------------------------------------------------- #
# Правила и префиксы
# --------------------------------------------------------------------------- #

def apply_rule(text: str, rule: Optional[str]) -> str:
    """
    Применяет именованное правило к строковому значению.

    Неизвестное правило и ошибки числового/датового форматирования
    оставляют значение как есть.
    """
    if not rule:
        return text

    name, _, param = rule.partition(":")

    if name == "uppercase":
        return text.upper()
    if name == "lowercase":
        return text.lower()
    if name == "ucfirst":
        return text[:1].upper() + text[1:]
    if name == "ucwords":
        return title_words(text)
    if name == "number_format":
        formatted = format_number(text)
        return text if formatted is None else formatted
    if name == "date":
        formatted = format_date(text, param or None)
        return text if formatted is None else formatted

    logger.debug(f"Unknown formatting rule '{name}' ignored")
    return text


def apply_prefixes(text: str, prefixes: Iterable[str]) -> str:
    """Применяет префиксы в порядке, обратном их записи в плейсхолдере."""
    for prefix in reversed(list(prefixes)):
        if prefix == "ls":
            text = " " + text
        elif prefix == "rs":
            text = text + " "
        elif prefix == "bs":
            text = " " + text + " "
        elif prefix == "comma":
            text = "," + text
        elif prefix == "uc":
            text = text.upper()
        elif prefix == "lc":
            text = text.lower()
        elif prefix == "tc":
            text = title_words(text)
        elif prefix == "fc":
            text = text[:1].upper() + text[1:].lower()
    return text


def format_value(value: Any, prefixes: Iterable[str] = (), rule: Optional[str] = None) -> str:
    """
    Итоговый экранированный текст для значения плейсхолдера.

    Неразрешённое значение и null дают пустую строку. Списки и объекты
    сериализуются в компактный JSON: шаблон с ошибкой не должен ронять документ.
    """
    if value is MISSING or value is None:
        return ""
    if isinstance(value, (list, Mapping)):
        return escape_markup(dumps_compact(value))

    text = apply_rule(stringify(value), rule)
    return escape_markup(apply_prefixes(text, prefixes))


__all__ = [
    "DEFAULT_DATE_PATTERN",
    "escape_markup",
    "stringify",
    "title_words",
    "format_number",
    "translate_date_pattern",
    "format_date",
    "apply_rule",
    "apply_prefixes",
    "format_value",
]
