"""Main entry point for the JFR panel exporter."""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from panel_export import Pipeline, Settings
from panel_export.config import DEFAULT_REPORTS_DIR, resolve_path
from panel_export.logging_config import get_logger, setup_logging

logger = get_logger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jfr-panel-exporter",
        description="Render every panel of the JFR dashboard over a recording's time window.",
    )
    parser.add_argument("trace", help="JFR recording (or its `jfr print --json` output)")
    parser.add_argument(
        "output",
        nargs="?",
        default=DEFAULT_REPORTS_DIR,
        help=f"directory for the exported PNG files (default: {DEFAULT_REPORTS_DIR})",
    )
    parser.add_argument("--layout", type=Path, help="dashboard JSON supplying the panels, relative to the project root")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="succeed even if some panels fail to export",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the exporter and return the process exit code."""
    args = build_parser().parse_args(argv)

    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging(log_level=args.log_level)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    if args.layout is not None:
        settings.panel_layout_path = resolve_path(args.layout, settings.panel_layout_path)
    if args.lenient:
        settings.strict_export = False

    pipeline = Pipeline(settings=settings)
    return asyncio.run(pipeline.run(args.trace, args.output))


if __name__ == "__main__":
    sys.exit(main())
