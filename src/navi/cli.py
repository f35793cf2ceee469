"""Command-line entrypoint.

Parses arguments, loads Settings, sets up logging, owns the httpx client for
one crawl and writes the rendered notes to stdout or a file.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from navi import __version__
from navi.client import NotionClient, build_http_client
from navi.config import Settings
from navi.crawler import crawl, crawl_documents, cutoff_for
from navi.errors import ErrorCode, NaviError
from navi.render import render, to_prompt_text

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Route structlog output to stderr at the configured level."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if settings.logging.format == "json"
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[settings.logging.level]
        ),
        # stdout is reserved for the rendered notes
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Crawl
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="navi",
        description="Collect the notes edited in your Notion workspace over the last few days.",
    )
    parser.add_argument("--version", action="version", version=f"navi {__version__}")
    parser.add_argument(
        "-d",
        "--days",
        type=int,
        default=None,
        help="number of days to look back (default: crawl.lookback_days from settings)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["markdown", "prompt"],
        default="markdown",
        help="'markdown': flat rendering with <br> separators; "
        "'prompt': plain text grouped under page titles",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="write the result to this file instead of stdout",
    )
    return parser


async def run(settings: Settings, days: int, output_format: str) -> str:
    """Run one crawl against the Notion API and return the rendered text."""
    if not settings.notion.token:
        raise NaviError(
            code=ErrorCode.INVALID_INPUT,
            message="No Notion token configured",
            suggestion="Set NAVI__NOTION__TOKEN or notion.token in navi.yaml.",
            recoverable=False,
        )

    cutoff = cutoff_for(days)
    log.info("crawl_starting", days=days, cutoff=cutoff.isoformat())

    options: dict[str, Any] = {
        "exclusions": settings.exclusions.page_patterns,
        "scan_budget_seconds": settings.crawl.scan_budget_seconds,
    }
    async with build_http_client(settings.notion) as http_client:
        client = NotionClient(http_client, settings.notion)
        if output_format == "prompt":
            return to_prompt_text(await crawl_documents(client, cutoff, **options))
        return render(await crawl(client, cutoff, **options))


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def _settings_error(exc: ValidationError) -> NaviError:
    problems = [
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in exc.errors()
    ]
    return NaviError(
        code=ErrorCode.INVALID_INPUT,
        message="Invalid configuration: " + "; ".join(problems),
        suggestion="Check the NAVI__* environment variables and navi.yaml.",
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings()
    except ValidationError as exc:
        log.error("settings_invalid", **_settings_error(exc).to_dict()["error"])
        return 1
    _setup_logging(settings)

    days = args.days if args.days is not None else settings.crawl.lookback_days
    if days < 1:
        log.error("invalid_days", days=days)
        return 2

    try:
        text = asyncio.run(run(settings, days, args.format))
    except NaviError as exc:
        log.error("crawl_failed", **exc.to_dict()["error"])
        return 1

    if args.output is not None:
        args.output.write_text(text, encoding="utf-8")
        log.info("output_written", path=str(args.output), chars=len(text))
    else:
        sys.stdout.write(text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
