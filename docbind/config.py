from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .types import RenderOptions

logger = logging.getLogger(__name__)

DEFAULT_CFG_FILE = "docbind.yaml"
COMPANY_NAME_ENV = "DOCBIND_COMPANY_NAME"

# --------------------------------------------------------------------------- #
# ДЕФОЛТЫ
# --------------------------------------------------------------------------- #
_DEFAULT_CFG: Dict[str, Any] = {
    "company_name": None,
    # дополнительные члены архива, которые обрабатываются если есть
    "members": ["word/header*.xml", "word/footer*.xml"],
}

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class DocbindConfig:
    company_name: Optional[str] = None
    members: Tuple[str, ...] = tuple(_DEFAULT_CFG["members"])


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Накладываем значения пользователя поверх дефолтов."""
    cfg = _DEFAULT_CFG.copy()
    for key, value in raw.items():
        if key not in _DEFAULT_CFG:
            logger.warning(f"Unknown config key '{key}' ignored")
            continue
        cfg[key] = value
    return cfg


def _validate(cfg: Dict[str, Any], path: Path) -> DocbindConfig:
    company_name = cfg["company_name"]
    if company_name is not None and not isinstance(company_name, str):
        raise ConfigError(f"{path}: 'company_name' must be a string")

    members = cfg["members"]
    if isinstance(members, str):
        members = [members]
    if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
        raise ConfigError(f"{path}: 'members' must be a list of glob patterns")

    return DocbindConfig(company_name=company_name, members=tuple(members))


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(path: Optional[Path] = None) -> DocbindConfig:
    """
    Загрузить docbind.yaml.

    • Если путь не задан — ищем docbind.yaml в текущем каталоге.
    • Если файла нет — вернуть дефолты (явно указанный путь обязан существовать).
    • Неизвестные ключи игнорируются с предупреждением.
    """
    explicit = path is not None
    path = Path(path) if explicit else Path.cwd() / DEFAULT_CFG_FILE

    if not path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return DocbindConfig()

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except (OSError, YAMLError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: config root must be a mapping")

    return _validate(_merge_defaults(raw), path)


def build_render_options(config: DocbindConfig, company_name: Optional[str] = None) -> RenderOptions:
    """
    Итоговые опции рендеринга.

    Приоритет значения company_name: аргумент CLI, файл конфигурации,
    переменная окружения DOCBIND_COMPANY_NAME.
    """
    name = company_name or config.company_name or os.environ.get(COMPANY_NAME_ENV) or None
    return RenderOptions(company_name=name, extra_members=config.members)


__all__ = ["DEFAULT_CFG_FILE", "COMPANY_NAME_ENV", "DocbindConfig", "load_config", "build_render_options"]
