from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from sheet_mapper.config.loader import ConfigError, MappingConfig, load_config
from sheet_mapper.excel.reader import ExcelSheetSource
from sheet_mapper.excel.source import SourceNotFoundError
from sheet_mapper.logging.diagnostics import DiagnosticsLog
from sheet_mapper.logging.init import log_summary, setup_logging
from sheet_mapper.mapping.binder import BindingError
from sheet_mapper.services.reader import SheetReader
from sheet_mapper.services.summary import render_summary_body

"""CLI entrypoint.

Reads one sheet of a workbook with a YAML binding config and prints the
resulting records as JSON lines on stdout, followed by a SUMMARY log line.

    python -m sheet_mapper.cli book.xlsx --config mapping.yml
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_STRICT_FAILURE = 2

CONFIG_ENV = "SHEET_MAPPER_CONFIG"
DEFAULT_CONFIG = Path("config/mapping.yml")


def _load_env_file(path: Path) -> None:
    """Load .env (existing environment variables win)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Excel sheet -> records mapper")
    p.add_argument("workbook", type=Path, help="Path to the .xlsx workbook")
    p.add_argument("--config", type=Path, default=None, help=f"Binding config YAML (default: ${CONFIG_ENV} or {DEFAULT_CONFIG})")
    p.add_argument("--sheet", default=None, help="Sheet name (overrides config; default: first sheet)")
    p.add_argument("--metadata", action="store_true", help="Print workbook custom properties then exit")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    p.add_argument("--diagnostics", action="store_true", help="Write skipped fields / excluded rows to logs/")
    p.add_argument("--strict", action="store_true", help="Exit 2 when any row was excluded or field skipped")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _config_path(args: argparse.Namespace) -> Path:
    if args.config is not None:
        return args.config
    env_value = os.getenv(CONFIG_ENV)
    return Path(env_value) if env_value else DEFAULT_CONFIG


def _print_json(data: object) -> None:
    print(json.dumps(data, ensure_ascii=False, default=str))


def _inspect_data(source: ExcelSheetSource) -> int:
    for name in source.sheet_names():
        header = source.header(name)
        sample = []
        for i, row in enumerate(source.rows(name)):
            if i >= 3:
                break
            sample.append(row)
        # datetime 含む場合 JSON 化できないため default=str で fallback
        _print_json({"sheet": name, "columns": header, "sample_rows": sample})
    return EXIT_SUCCESS


def _open_source(workbook: Path, cfg: MappingConfig | None) -> ExcelSheetSource:
    if cfg is None:
        return ExcelSheetSource(workbook)
    return ExcelSheetSource(
        workbook,
        header_row=cfg.header_row,
        null_sentinels=cfg.null_sentinels,
        skip_blank_rows=cfg.skip_blank_rows,
    )


def main(argv: list[str] | None = None) -> int:
    # NOTE: [] が渡された場合に sys.argv[1:] が混入しないよう None のときのみ読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    _load_env_file(Path(".env"))

    if not args.workbook.exists():
        logger.error(f"workbook not found: {args.workbook}")
        return EXIT_FATAL

    if args.metadata or args.inspect_data:
        source = _open_source(args.workbook, None)
        if args.metadata:
            _print_json(source.metadata())
            return EXIT_SUCCESS
        return _inspect_data(source)

    try:
        cfg = load_config(_config_path(args))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    source = _open_source(args.workbook, cfg)
    sheet = args.sheet if args.sheet is not None else cfg.sheet
    reader = SheetReader(source, None, progress=True)
    try:
        result = reader.read_result(cfg.bindings, sheet, cfg.required)
    except SourceNotFoundError as e:
        logger.error(f"source: {e}")
        return EXIT_FATAL
    except BindingError as e:
        logger.error(f"binding: {e}")
        return EXIT_FATAL

    if result.sheet_name is None:
        logger.warning(f"sheet not found: {sheet}")

    for record in result.items:
        _print_json(record.to_dict())

    if args.diagnostics:
        diagnostics = DiagnosticsLog()
        diagnostics.collect(result)
        written = diagnostics.flush()
        if written is not None:
            logger.info(f"diagnostics written: {written}")

    log_summary(render_summary_body(result))

    if args.strict and (result.excluded_rows or result.skipped_fields):
        return EXIT_STRICT_FAILURE
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
