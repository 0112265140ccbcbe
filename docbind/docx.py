"""
Пакет документа (.docx) как zip-контейнер.

Движок работает только с текстом отдельных членов архива: этот модуль
отдаёт их содержимое и собирает новый архив с заменёнными членами.
Остальные члены копируются без изменений, в исходном порядке и с исходным
методом сжатия.
"""

from __future__ import annotations

import fnmatch
import io
import logging
import zipfile
from pathlib import Path
from typing import Dict, Iterable, List, Union

from .errors import ArchiveError, PayloadMissingError

logger = logging.getLogger(__name__)

DOCUMENT_MEMBER = "word/document.xml"

Source = Union[bytes, str, Path]


class DocxPackage:
    """
    Контейнер документа в памяти.

    Исходные байты не изменяются; замены копятся до вызова to_bytes().
    """

    def __init__(self, data: bytes):
        self._data = data
        self._replacements: Dict[str, str] = {}
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                self._names: List[str] = zf.namelist()
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
            raise ArchiveError(f"Cannot read document package: {e}") from e

    @classmethod
    def open(cls, source: Source) -> "DocxPackage":
        """
        Открывает контейнер из байтов или файла.

        Raises:
            ArchiveError: Файл не читается или не является zip-архивом
        """
        if isinstance(source, bytes):
            return cls(source)
        path = Path(source)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ArchiveError(f"Cannot read document package {path}: {e}") from e
        return cls(data)

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def has_member(self, member: str) -> bool:
        return member in self._names

    def matching(self, patterns: Iterable[str]) -> List[str]:
        """Члены архива, подходящие под glob-шаблоны, в порядке архива."""
        patterns = list(patterns)
        return [name for name in self._names if any(fnmatch.fnmatchcase(name, p) for p in patterns)]

    def read_text(self, member: str) -> str:
        """
        Текст члена архива (с учётом уже сделанной замены).

        Raises:
            PayloadMissingError: Члена нет в архиве
            ArchiveError: Член не читается как UTF-8
        """
        if member in self._replacements:
            return self._replacements[member]
        if member not in self._names:
            raise PayloadMissingError(member)
        try:
            with zipfile.ZipFile(io.BytesIO(self._data)) as zf:
                return zf.read(member).decode("utf-8")
        except (zipfile.BadZipFile, UnicodeDecodeError, OSError) as e:
            raise ArchiveError(f"Cannot read {member}: {e}") from e

    def replace_text(self, member: str, text: str) -> None:
        """Запоминает новый текст члена архива."""
        if member not in self._names:
            raise PayloadMissingError(member)
        self._replacements[member] = text

    def to_bytes(self) -> bytes:
        """Собирает архив с заменёнными членами."""
        out = io.BytesIO()
        try:
            with zipfile.ZipFile(io.BytesIO(self._data)) as zin, \
                    zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as zout:
                for info in zin.infolist():
                    if info.filename in self._replacements:
                        payload = self._replacements[info.filename].encode("utf-8")
                    else:
                        payload = zin.read(info)
                    zout.writestr(info, payload)
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveError(f"Cannot write document package: {e}") from e
        logger.debug(f"Rebuilt package with {len(self._replacements)} replaced members")
        return out.getvalue()


def write_package(data: bytes, path: Path) -> Path:
    """
    Записывает готовый архив на диск.

    Raises:
        ArchiveError: Файл не удалось записать
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise ArchiveError(f"Cannot write document package {path}: {e}") from e
    return path


__all__ = ["DOCUMENT_MEMBER", "DocxPackage", "write_package"]
