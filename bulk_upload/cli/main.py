from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..client.submission import BulkSubmissionClient
from ..config.loader import ConfigError, UploadConfig, load_config
from ..errors import ParseError
from ..excel.reader import cell_text, read_spreadsheet
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import setup_logging
from ..services.orchestrator import ProcessingError, collect_inputs, process_all, scan_spreadsheets

"""CLI entrypoint: python -m bulk_upload.cli [PATH ...]

Flow per spreadsheet: preview -> confirm -> upload -> result table -> SUMMARY.
Paths may be files or directories (scanned non-recursively for .xlsx/.xls);
with no paths, source_directory from the config is used.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

DEFAULT_CONFIG_PATH = Path("config/upload.yml")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; its values take precedence over the process env."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Bulk upload candidates from Excel sheets")
    p.add_argument("paths", nargs="*", type=Path, help="Spreadsheet files or directories")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--yes", "-y", action="store_true", help="Upload without asking for confirmation")
    p.add_argument("--preview-only", action="store_true", help="Show previews and exit without uploading")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _ask_confirmation(path: Path, count: int) -> bool:
    try:
        answer = input(f"Upload {count} candidates from {path.name}? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _inspect_data(files: list[Path]) -> int:
    for f in files:
        print(f"FILE: {f.name}")
        try:
            sheet = read_spreadsheet(f)
        except ParseError as e:
            print(f"  read_error: {e}")
            continue
        print(f"  SHEET: {sheet.sheet_name} cols={sheet.columns} rows={len(sheet.rows)}")
        sample = [{k: cell_text(v) for k, v in r.items()} for r in sheet.rows[:3]]
        print("    sample_rows=", sample)
    return EXIT_SUCCESS_ALL


def _input_files(args: argparse.Namespace, cfg: UploadConfig) -> list[Path] | None:
    """Spreadsheets to process, or None when neither paths nor source_directory are given.

    Raises:
        ProcessingError: a path or the configured source_directory is missing
    """
    if args.paths:
        return collect_inputs(args.paths)
    if cfg.source_directory:
        return scan_spreadsheets(Path(cfg.source_directory))
    return None


def main(argv: list[str] | None = None) -> int:
    # An explicit [] must not fall back to sys.argv (pytest arguments would leak in)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        files = _input_files(args, cfg)
    except ProcessingError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL
    if files is None:
        logger.error("no input: pass spreadsheet paths or set source_directory")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(files)

    if not files:
        logger.info("no spreadsheets found")
        return EXIT_SUCCESS_ALL

    logger.info(f"Uploading to: {cfg.api.base_url.rstrip('/')}/{cfg.api.endpoint.lstrip('/')}")
    error_log = ErrorLogBuffer(cfg.logs_directory)
    confirm = (lambda _path, _count: True) if args.yes else _ask_confirmation
    with BulkSubmissionClient(
        cfg.api.base_url,
        cfg.api.endpoint,
        auth_token=cfg.api.auth_token,
        timeout=cfg.api.timeout_seconds,
    ) as client:
        run = process_all(
            files,
            client,
            confirm=confirm,
            preview_only=args.preview_only,
            preview_limit=cfg.preview_limit,
            error_log=error_log,
        )

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")
    logger.info(f"files={len(run.outcomes)} uploaded={run.uploaded_files} failed={run.failed_files}")

    return EXIT_SUCCESS_ALL if run.all_ok else EXIT_PARTIAL_FAILURE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
