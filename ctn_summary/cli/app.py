from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, load_config, resolve_config_path
from ..logging.init import log_summary, setup_logging
from ..models.processed_file import FileStatus
from ..services.orchestrator import ProcessingError, process_all
from ..services.storage import ProcessedFileStore
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (may set CTN_SUMMARY_CONFIG)
- Load config
- Summarize the named workbooks, or every .xlsx in source_directory
- Emit the SUMMARY line and exit with the contract code
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = False) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ctn-summary",
        description="Summarize shipment CTN workbooks per destination warehouse",
    )
    p.add_argument("files", nargs="*", type=Path, help="Workbooks to process (default: source_directory)")
    p.add_argument("--config", type=Path, default=None, help="Path to summary.yml")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--json", action="store_true", help="Print each completed summary as JSON")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    config_path = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    store = ProcessedFileStore()
    files = args.files or None
    if files is None:
        logger.info(f"Processing files from: {cfg.source_directory}")
    try:
        result = process_all(cfg, store=store, files=files)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for stat in result.file_stats or []:
        if stat.status == FileStatus.COMPLETED.value:
            logger.info(f"{stat.file_name}: ctn={stat.ctn} output={stat.processed_filename}")
        else:
            logger.warning(f"{stat.file_name}: failed ({stat.error})")

    if args.json:
        # 直近 recent_limit 件を古い順に出力
        for record in reversed(store.recent(cfg.recent_limit)):
            if record.processed_data is not None:
                print(json.dumps(record.processed_data.to_dict(), ensure_ascii=False))

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary が "SUMMARY " を付与するため除去
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL

