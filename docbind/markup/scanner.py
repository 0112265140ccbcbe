"""
Структурный сканер разметки WordprocessingML.

Находит абзацы (`w:p`), прогоны (`w:r`), свойства прогонов (`w:rPr`)
и текстовые узлы (`w:t`) с точными смещениями в исходной строке.
Полный разбор XML не выполняется: прочие элементы просто пропускаются,
поэтому всё, чего не касается исправление, остаётся байт-в-байт.
Вложенные абзацы (надписи внутри рисунков) обрабатываются через стек.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

_TAG = re.compile(
    r"<(?P<closing>/)?(?P<name>w:(?:p|r|t|rPr))(?=[\s/>])(?P<attrs>[^>]*?)(?P<empty>/)?>"
)
_TEXT_CLOSE = "</w:t>"
_PROPS_CLOSE = "</w:rPr>"
_PROPS_TAG = re.compile(r"<(?P<closing>/)?w:rPr(?=[\s/>])[^>]*?(?P<empty>/)?>")

Span = Tuple[int, int]


def _find_props_close(text: str, pos: int) -> int:
    """Позиция парного `</w:rPr>` с учётом вложенных `w:rPr` (история правок)."""
    depth = 1
    while True:
        match = _PROPS_TAG.search(text, pos)
        if match is None:
            return -1
        if match.group("closing"):
            depth -= 1
            if depth == 0:
                return match.start()
        elif not match.group("empty"):
            depth += 1
        pos = match.end()


@dataclass
class TextRun:
    """
    Прогон `<w:r>` с текстовым содержимым.

    Attributes:
        start: Смещение открывающего тега
        end: Смещение сразу за `</w:r>`
        open_tag: Открывающий тег целиком (с атрибутами)
        properties: Блок `<w:rPr>` или None
        leaves: Содержимое текстовых узлов `<w:t>` по порядку
        residual: Прочее содержимое прогона (табуляции, разрывы, рисунки)
    """
    start: int
    end: int = -1
    open_tag: str = "<w:r>"
    properties: Optional[str] = None
    leaves: List[str] = field(default_factory=list)
    residual: str = ""
    # Внутри прогона есть собственные абзацы (надпись в рисунке)
    nested: bool = False
    # Интервалы внутри прогона, не входящие в residual
    _consumed: List[Span] = field(default_factory=list, repr=False)
    _inner_start: int = field(default=0, repr=False)

    @property
    def text(self) -> Optional[str]:
        """Склеенный текст прогона или None, если текстовых узлов нет."""
        return "".join(self.leaves) if self.leaves else None


@dataclass
class Paragraph:
    """Абзац `<w:p>` и его прямые прогоны в порядке следования."""
    start: int
    runs: List[TextRun] = field(default_factory=list)


Frame = Union[Paragraph, TextRun]


class MarkupScanner:
    """
    Сканер абзацев и прогонов.

    Прогоны вне какого-либо абзаца (фрагмент разметки без `<w:p>`)
    собираются в неявный корневой абзац.
    """

    def __init__(self, text: str):
        self.text = text

    def scan(self) -> List[Paragraph]:
        """
        Возвращает абзацы в порядке закрытия (вложенные раньше внешних).

        Незакрытые элементы в конце текста игнорируются.
        """
        text = self.text
        root = Paragraph(start=0)
        paragraphs: List[Paragraph] = []
        stack: List[Frame] = []
        pos = 0

        while True:
            match = _TAG.search(text, pos)
            if match is None:
                break
            pos = match.end()
            name = match.group("name")
            closing = match.group("closing") is not None
            empty = match.group("empty") is not None

            if name == "w:p":
                if closing:
                    frame = self._pop(stack, Paragraph)
                    if frame is not None:
                        paragraphs.append(frame)
                elif not empty:
                    for frame in stack:
                        if isinstance(frame, TextRun):
                            frame.nested = True
                    stack.append(Paragraph(start=match.start()))
                continue

            if name == "w:r":
                if closing:
                    run = self._pop(stack, TextRun)
                    if run is not None:
                        run.end = match.end()
                        run.residual = self._residual(run, match.start())
                        self._owner(stack, root).runs.append(run)
                elif not empty:
                    stack.append(TextRun(start=match.start(), open_tag=match.group(0), _inner_start=match.end()))
                continue

            current = stack[-1] if stack else None
            if not isinstance(current, TextRun):
                # w:t/w:rPr вне прогона (например, в свойствах абзаца) нас не интересуют
                continue

            if name == "w:t" and not closing:
                if empty:
                    current._consumed.append((match.start(), match.end()))
                    continue
                close = text.find(_TEXT_CLOSE, match.end())
                if close < 0:
                    break
                current.leaves.append(text[match.end():close])
                pos = close + len(_TEXT_CLOSE)
                current._consumed.append((match.start(), pos))
                continue

            if name == "w:rPr" and not closing:
                if empty:
                    end = match.end()
                else:
                    close = _find_props_close(text, match.end())
                    if close < 0:
                        break
                    end = close + len(_PROPS_CLOSE)
                if current.properties is None:
                    current.properties = text[match.start():end]
                current._consumed.append((match.start(), end))
                pos = end

        if root.runs:
            paragraphs.append(root)
        logger.debug(f"Scanned {len(paragraphs)} paragraphs")
        return paragraphs

    @staticmethod
    def _pop(stack: List[Frame], kind: type) -> Optional[Frame]:
        """Снимает со стека ближайший кадр нужного типа (вместе с незакрытыми над ним)."""
        for idx in range(len(stack) - 1, -1, -1):
            if isinstance(stack[idx], kind):
                frame = stack[idx]
                del stack[idx:]
                return frame
        return None

    @staticmethod
    def _owner(stack: List[Frame], root: Paragraph) -> Paragraph:
        for frame in reversed(stack):
            if isinstance(frame, Paragraph):
                return frame
        return root

    def _residual(self, run: TextRun, inner_end: int) -> str:
        """Содержимое прогона за вычетом свойств и текстовых узлов."""
        parts: List[str] = []
        cursor = run._inner_start
        for start, end in run._consumed:
            parts.append(self.text[cursor:start])
            cursor = end
        parts.append(self.text[cursor:inner_end])
        return "".join(parts)


def scan_paragraphs(text: str) -> List[Paragraph]:
    """Удобная функция: список абзацев разметки."""
    return MarkupScanner(text).scan()


__all__ = ["TextRun", "Paragraph", "MarkupScanner", "scan_paragraphs"]
