"""
Исправление плейсхолдеров, разорванных между прогонами.

Текстовые редакторы дробят текст на прогоны по истории правок и проверке
орфографии, и `{{client_name}}` может оказаться записан как
`{{client_` + `name}}` в двух соседних `<w:r>`. Перед разрешением шаблона
такие прогоны склеиваются в один.

Разделители считаются плоскими маркерами, а не вложенной грамматикой:
слияние завершается, как только в буфере число открывающих и закрывающих
разделителей каждой пары сравнялось.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .scanner import Paragraph, TextRun, scan_paragraphs

logger = logging.getLogger(__name__)

Delimiters = Tuple[str, str]

PLACEHOLDER_DELIMITERS: Delimiters = ("{{", "}}")
CONDITION_DELIMITERS: Delimiters = ("[[", "]]")
DEFAULT_DELIMITERS: Tuple[Delimiters, ...] = (PLACEHOLDER_DELIMITERS, CONDITION_DELIMITERS)

# (начало, конец, замена) в координатах исходного текста
Edit = Tuple[int, int, str]


def _has_unmatched_open(text: str, delimiters: Sequence[Delimiters]) -> bool:
    return any(text.count(left) > text.count(right) for left, right in delimiters)


def _is_balanced(text: str, delimiters: Sequence[Delimiters]) -> bool:
    return all(text.count(left) == text.count(right) for left, right in delimiters)


def build_run(open_tag: str, properties: Optional[str], text: str, residual: str = "") -> str:
    """
    Собирает прогон с одним текстовым узлом.

    Текст с пробелами по краям помечается `xml:space="preserve"`,
    иначе они схлопываются при отображении.
    """
    space = ' xml:space="preserve"' if text.strip() != text else ""
    return f"{open_tag}{properties or ''}<w:t{space}>{text}</w:t>{residual}</w:r>"


class FragmentRepairer:
    """
    Склеивает прогоны, между которыми разорван плейсхолдер.

    Прогон открывает слияние, если в его тексте есть незакрытый открывающий
    разделитель. Пока слияние не завершено, текст следующих прогонов
    добавляется в буфер. Прогоны без текстовых узлов остаются на месте
    и слияние не прерывают.
    """

    def __init__(self, delimiters: Sequence[Delimiters] = DEFAULT_DELIMITERS):
        self.delimiters = tuple(delimiters)

    def repair(self, markup: str) -> str:
        """
        Возвращает разметку, в которой ни один плейсхолдер не разорван.

        Чистый вход возвращается без изменений.
        """
        edits: List[Edit] = []
        for paragraph in scan_paragraphs(markup):
            edits.extend(self._repair_paragraph(paragraph))

        if not edits:
            return markup

        logger.debug(f"Repairing split placeholders: {len(edits)} run edits")
        result = markup
        for start, end, replacement in sorted(edits, key=lambda e: e[0], reverse=True):
            result = result[:start] + replacement + result[end:]
        return result

    def _repair_paragraph(self, paragraph: Paragraph) -> List[Edit]:
        """Группирует прогоны абзаца и строит правки для групп из двух и более прогонов."""
        edits: List[Edit] = []
        pending: List[TextRun] = []
        buffer = ""

        for run in paragraph.runs:
            text = run.text
            if text is None or run.nested:
                continue

            if pending:
                pending.append(run)
                buffer += text
            elif _has_unmatched_open(text, self.delimiters):
                pending = [run]
                buffer = text
                continue
            else:
                continue

            if _is_balanced(buffer, self.delimiters):
                edits.extend(self._merge(pending, buffer))
                pending = []
                buffer = ""

        if pending:
            # Незакрытый плейсхолдер: оставляем прогоны как были
            logger.debug(f"Unterminated placeholder fragment {buffer[:40]!r} left unmerged")

        return edits

    @staticmethod
    def _merge(runs: List[TextRun], text: str) -> List[Edit]:
        """
        Первый прогон группы заменяется склеенным, остальные удаляются.

        Свойства берутся из первого прогона, у которого они непустые.
        """
        properties = next((run.properties for run in runs if run.properties), None)
        residual = "".join(run.residual for run in runs if run.residual.strip())

        first = runs[0]
        edits: List[Edit] = [(first.start, first.end, build_run(first.open_tag, properties, text, residual))]
        edits.extend((run.start, run.end, "") for run in runs[1:])
        return edits


def repair_fragments(markup: str, delimiters: Sequence[Delimiters] = DEFAULT_DELIMITERS) -> str:
    """
    Склеивает плейсхолдеры, разорванные между соседними прогонами.

    Args:
        markup: Разметка одного абзаца или целого документа
        delimiters: Пары разделителей, которые нужно восстанавливать

    Returns:
        Исправленная разметка
    """
    return FragmentRepairer(delimiters).repair(markup)


__all__ = [
    "PLACEHOLDER_DELIMITERS",
    "CONDITION_DELIMITERS",
    "DEFAULT_DELIMITERS",
    "FragmentRepairer",
    "build_run",
    "repair_fragments",
]
