"""
Разбор выражения плейсхолдера.

`{{ ls.uc.client.name | ucwords }}` -> путь `client.name`,
префиксы `["ls", "uc"]`, правило `ucwords`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

# Порядок проверки префиксов; "," записывается без точки и означает "comma"
_PREFIX_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("ls.", "ls"),
    ("rs.", "rs"),
    ("bs.", "bs"),
    (",", "comma"),
    ("uc.", "uc"),
    ("lc.", "lc"),
    ("tc.", "tc"),
    ("fc.", "fc"),
)


@dataclass(frozen=True)
class PlaceholderExpression:
    """
    Разобранное выражение плейсхолдера.

    Префиксы хранятся в порядке записи слева направо,
    применяются при рендеринге в обратном порядке.
    """
    path: str
    prefixes: Tuple[str, ...] = ()
    rule: Optional[str] = None


def parse_placeholder(expr: str) -> PlaceholderExpression:
    """
    Разбирает тело плейсхолдера.

    Правилом считается только сегмент сразу после первого `|`.
    Префиксы снимаются с начала пути, пока хотя бы один совпадает.
    """
    parts = expr.split("|")
    path = parts[0].strip()
    rule = parts[1].strip() if len(parts) > 1 else ""

    prefixes: List[str] = []
    matched = True
    while matched:
        matched = False
        for marker, name in _PREFIX_MARKERS:
            if path.startswith(marker):
                prefixes.append(name)
                path = path[len(marker):]
                matched = True
                break

    return PlaceholderExpression(path=path, prefixes=tuple(prefixes), rule=rule or None)


__all__ = ["PlaceholderExpression", "parse_placeholder"]
