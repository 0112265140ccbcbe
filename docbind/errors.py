"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from DocbindUserError.

Template and data problems are never errors: the engines degrade to blank
output instead. Only the collaborator boundary (archives, configuration,
data files) raises.
"""

from __future__ import annotations


class DocbindUserError(Exception):
    """
    Base class for all user-facing errors in docbind.

    These errors indicate problems that the user can fix:
    a broken document package, an invalid configuration, an unreadable data file.
    """
    pass


class ArchiveError(DocbindUserError):
    """Контейнер документа не удалось прочитать или записать."""
    pass


class PayloadMissingError(ArchiveError):
    """В контейнере отсутствует обязательный член с разметкой."""

    def __init__(self, member: str):
        super().__init__(f"{member} not found in document package")
        self.member = member


class ConfigError(DocbindUserError):
    """Некорректный файл конфигурации."""
    pass


class DataError(DocbindUserError):
    """Некорректный файл с данными для подстановки."""
    pass


__all__ = ["DocbindUserError", "ArchiveError", "PayloadMissingError", "ConfigError", "DataError"]
