# src/main.py - v3
"""CLI entry point: analyze, document, complaint, status commands.

Usage:
    jurisdraft analyze <file> [--instructions TEXT] [--strict] [--timeout S]
    jurisdraft document <document_id> [--instructions TEXT] [--strict] [--timeout S]
    jurisdraft complaint --agency NAME --document-id ID [--related-id ID ...]
    jurisdraft status

Results are printed to stdout as JSON; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from jurisdraft.config.settings import ConfigurationError, Settings
from jurisdraft.core.errors import JurisdraftError
from jurisdraft.llm.client_factory import UnsupportedProviderError
from jurisdraft.logging.logger import setup_logging
from jurisdraft.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = Settings()
        if args.store is not None:
            settings = settings.model_copy(update={"store_path": args.store})
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except (JurisdraftError, UnsupportedProviderError) as exc:
        logger.error("%s: %s", type(exc).__name__, exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="jurisdraft",
        description=f"jurisdraft v{__version__}: legal text analysis and complaint drafting",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--store", type=Path, default=None,
        help="Record store file (default: STORE_PATH setting)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- analyze ---
    p_analyze = subparsers.add_parser("analyze", help="Analyze a text file")
    p_analyze.add_argument("file", type=Path, help="Path to a UTF-8 text file")
    _add_analysis_options(p_analyze)
    p_analyze.set_defaults(func=_cmd_analyze)

    # --- document ---
    p_document = subparsers.add_parser(
        "document", help="Analyze a stored document and its attachments",
    )
    p_document.add_argument("document_id", help="Document id in the record store")
    _add_analysis_options(p_document)
    p_document.set_defaults(func=_cmd_document)

    # --- complaint ---
    p_complaint = subparsers.add_parser(
        "complaint", help="Draft a complaint about a stored document",
    )
    p_complaint.add_argument("--agency", required=True, help="Addressee agency")
    p_complaint.add_argument("--document-id", required=True, help="Subject document id")
    p_complaint.add_argument(
        "--related-id", action="append", default=None,
        help="Related document id (repeatable; default: earlier store documents)",
    )
    p_complaint.add_argument(
        "--timeout", type=float, default=None,
        help="Overall deadline in seconds for the model call",
    )
    p_complaint.set_defaults(func=_cmd_complaint)

    # --- status ---
    p_status = subparsers.add_parser("status", help="Probe the model backend")
    p_status.set_defaults(func=_cmd_status)

    return parser


def _add_analysis_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--instructions", default="",
        help="Extra reviewer instructions appended to the prompt",
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="Use the low-temperature strict analysis mode",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Overall deadline in seconds for all model calls",
    )


async def _cmd_analyze(args: argparse.Namespace, settings: Settings) -> int:
    from jurisdraft.api.facade import analyze_text, build_services

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1

    text = file_path.read_text(encoding="utf-8")
    result = await analyze_text(
        text, args.instructions, args.strict,
        services=build_services(settings), timeout_s=args.timeout,
    )
    _print_json(result.model_dump(mode="json", by_alias=True))
    return 0


async def _cmd_document(args: argparse.Namespace, settings: Settings) -> int:
    from jurisdraft.api.facade import analyze_document, build_services

    result = await analyze_document(
        args.document_id, args.instructions, args.strict,
        services=build_services(settings), timeout_s=args.timeout,
    )
    _print_json(result.model_dump(mode="json", by_alias=True))
    return 0


async def _cmd_complaint(args: argparse.Namespace, settings: Settings) -> int:
    from jurisdraft.api.facade import build_services, generate_complaint
    from jurisdraft.core.errors import NotFoundError
    from jurisdraft.core.models import ComplaintRequest

    services = build_services(settings)
    related = None
    if args.related_id:
        related = []
        for doc_id in args.related_id:
            doc = await services.store.find_document(doc_id)
            if doc is None:
                raise NotFoundError(doc_id)
            related.append(doc)

    request = ComplaintRequest(
        agency=args.agency, document_id=args.document_id, related_documents=related,
    )
    complaint = await generate_complaint(request, services=services, timeout_s=args.timeout)
    _print_json(complaint.model_dump(mode="json", by_alias=True))
    return 0


async def _cmd_status(args: argparse.Namespace, settings: Settings) -> int:
    from jurisdraft.api.facade import build_services, check_status

    report = await check_status(build_services(settings))
    _print_json(report.model_dump(mode="json"))
    return 0 if report.status == "ready" else 1


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
