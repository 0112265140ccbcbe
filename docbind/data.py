"""
Загрузка контекста данных из файлов.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import DataError

_yaml = YAML(typ="safe")

_YAML_SUFFIXES = (".yaml", ".yml")


def load_data(source: Union[str, Path]) -> Dict[str, Any]:
    """
    Читает данные для подстановки.

    Поддерживает три формата:
    - JSON-файл (*.json и всё прочее)
    - YAML-файл (*.yaml, *.yml)
    - `-`: JSON из stdin

    Raises:
        DataError: Файл не читается, не разбирается или корень не объект
    """
    try:
        if str(source) == "-":
            raw = json.loads(sys.stdin.read())
        else:
            path = Path(source)
            with path.open(encoding="utf-8") as f:
                raw = _yaml.load(f) if path.suffix.lower() in _YAML_SUFFIXES else json.load(f)
    except (OSError, ValueError, YAMLError) as e:
        raise DataError(f"Failed to load data from {source}: {e}") from e

    if not isinstance(raw, dict):
        raise DataError(f"Data root in {source} must be an object, got {type(raw).__name__}")
    return raw


__all__ = ["load_data"]
