from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import RunConfig, load_run_config, parse_assignments
from .errors import SmartScriptError
from .jsonic import dumps as jdumps
from .processor import TemplateProcessor, apply_response_settings
from .report_schema import RenderReport, TokenRecord
from .request_context import RequestContext
from .scripting import tokenize_template, write_tree
from .version import tool_version

logger = logging.getLogger("smartscript")


def _setup_logging() -> None:
    level = logging.DEBUG if os.environ.get("SMARTSCRIPT_DEBUG") else logging.WARNING
    logger.setLevel(level)
    if not logger.handlers:
        h = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        h.setFormatter(fmt)
        logger.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="smartscript",
        description="SmartScript template engine",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для render/report
    def add_run_args(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("file", type=Path, help="файл шаблона (UTF-8)")
        sp.add_argument(
            "--config",
            type=Path,
            metavar="YAML",
            help="YAML-файл с параметрами запроса и атрибутами ответа",
        )
        sp.add_argument(
            "--param",
            action="append",
            default=[],
            metavar="NAME=VALUE",
            help="параметр запроса (можно указать несколько)",
        )
        sp.add_argument(
            "--pparam",
            action="append",
            default=[],
            metavar="NAME=VALUE",
            help="начальный постоянный параметр",
        )
        sp.add_argument(
            "--tparam",
            action="append",
            default=[],
            metavar="NAME=VALUE",
            help="начальный временный параметр",
        )

    sp_render = sub.add_parser("render", help="Выполнить шаблон и вывести результат")
    add_run_args(sp_render)
    sp_render.add_argument(
        "--headers",
        action="store_true",
        help="предварить тело HTTP-заголовками ответа",
    )

    sp_report = sub.add_parser("report", help="JSON-отчёт: результат и итоговые параметры")
    add_run_args(sp_report)

    sp_tree = sub.add_parser("tree", help="Каноническая форма разобранного шаблона")
    sp_tree.add_argument("file", type=Path, help="файл шаблона (UTF-8)")

    sp_tokens = sub.add_parser("tokens", help="Поток токенов лексера (JSON)")
    sp_tokens.add_argument("file", type=Path, help="файл шаблона (UTF-8)")

    return p


def _run_config(ns: argparse.Namespace) -> RunConfig:
    config = load_run_config(ns.config) if ns.config is not None else RunConfig()
    return config.with_overrides(
        parameters=parse_assignments(ns.param),
        persistent_parameters=parse_assignments(ns.pparam),
        temporary_parameters=parse_assignments(ns.tparam),
        headers=True if getattr(ns, "headers", False) else None,
    )


def _read_template(path: Path) -> str:
    if not path.is_file():
        raise ValueError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8")


def _render(ns: argparse.Namespace) -> None:
    config = _run_config(ns)
    context = RequestContext(
        sys.stdout.buffer,
        parameters=config.parameters,
        persistent_parameters=dict(config.persistent_parameters),
        temporary_parameters=dict(config.temporary_parameters),
        generate_header=config.headers,
    )
    apply_response_settings(context, config)
    sys.stdout.flush()
    TemplateProcessor().render_text(_read_template(ns.file), context, str(ns.file))


def main(argv: Optional[List[str]] = None) -> int:
    _setup_logging()
    ns = _build_parser().parse_args(argv)

    try:
        if ns.cmd == "render":
            _render(ns)
            return 0

        if ns.cmd == "report":
            result = TemplateProcessor().render_with_config(
                _read_template(ns.file), _run_config(ns), str(ns.file)
            )
            report = RenderReport(
                output=result.output,
                mime_type=result.mime_type,
                status_code=result.status_code,
                status_text=result.status_text,
                persistent_parameters=result.persistent_parameters,
                temporary_parameters=result.temporary_parameters,
            )
            sys.stdout.write(jdumps(report))
            return 0

        if ns.cmd == "tree":
            document = TemplateProcessor().compile(_read_template(ns.file), str(ns.file))
            sys.stdout.write(write_tree(document))
            return 0

        if ns.cmd == "tokens":
            records = [
                TokenRecord(type=token.type.name, value=token.value)
                for token in tokenize_template(_read_template(ns.file))
            ]
            sys.stdout.write(jdumps(records))
            return 0

    except SmartScriptError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
