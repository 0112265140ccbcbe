from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .config import build_render_options, load_config
from .data import load_data
from .docx import write_package
from .engine import process_template_string, render_docx_file, repair_docx
from .errors import DocbindUserError
from .markup import repair_fragments
from .version import tool_version

DEBUG_ENV = "DOCBIND_DEBUG"


def _setup_logging() -> None:
    level = logging.DEBUG if os.environ.get(DEBUG_ENV) else logging.WARNING
    root = logging.getLogger("docbind")
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        root.addHandler(h)
    root.setLevel(level)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="docbind",
        description="Bind structured data into document templates",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для render/text
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("template", help="файл шаблона")
        sp.add_argument("data", help="данные: JSON, YAML или - для JSON из stdin")
        sp.add_argument(
            "--company-name",
            help="значение для {{company_name}} (перекрывает конфиг и DOCBIND_COMPANY_NAME)",
        )
        sp.add_argument(
            "--config",
            type=Path,
            help="файл конфигурации (по умолчанию ./docbind.yaml, если есть)",
        )

    sp_render = sub.add_parser("render", help="Рендеринг .docx шаблона")
    add_common(sp_render)
    sp_render.add_argument("-o", "--output", type=Path, required=True, help="путь результата")

    sp_text = sub.add_parser("text", help="Рендеринг текстового шаблона в stdout")
    add_common(sp_text)

    sp_repair = sub.add_parser("repair", help="Только склейка разорванных плейсхолдеров")
    sp_repair.add_argument("input", type=Path, help=".docx или XML документа")
    sp_repair.add_argument("-o", "--output", type=Path, help="путь результата (по умолчанию stdout для XML)")

    return p


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocbindUserError(f"Failed to read {path}: {e}") from e


def _run_repair(input_path: Path, output: Optional[Path]) -> int:
    if input_path.suffix.lower() == ".docx":
        if output is None:
            raise DocbindUserError("--output is required when repairing a .docx package")
        write_package(repair_docx(input_path), output)
        return 0

    repaired = repair_fragments(_read_text(input_path))
    if output is None:
        sys.stdout.write(repaired)
    else:
        output.write_text(repaired, encoding="utf-8")
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging()

    try:
        if ns.cmd == "repair":
            return _run_repair(ns.input, ns.output)

        options = build_render_options(load_config(ns.config), ns.company_name)
        data = load_data(ns.data)

        if ns.cmd == "render":
            render_docx_file(Path(ns.template), ns.output, data, options)
            return 0

        if ns.cmd == "text":
            sys.stdout.write(process_template_string(_read_text(Path(ns.template)), data, options))
            return 0

    except DocbindUserError as e:
        sys.stderr.write(f"Error: {str(e).rstrip()}\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
