from __future__ import annotations

import json
from typing import Any


def dumps_compact(obj: Any) -> str:
    """
    Компактная форма без пробелов после разделителей; ensure_ascii=False.

    Используется как структурное строковое представление списков и объектов,
    попавших в плейсхолдер. Несериализуемые значения приводятся к str.
    """
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"), default=str)


__all__ = ["dumps_compact"]
