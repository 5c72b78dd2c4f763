"""CLI entrypoint for checking a site's links and anchors."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any

from .config import CheckConfig, load_config_payload
from .constants import EXIT_CONFIG_ERROR, EXIT_INTERRUPTED, JSON_INDENT
from .pipeline import CheckResult, LinkChecker


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl a site from its root and report broken links and missing anchors.",
    )

    parser.add_argument("--root", type=str, default=None, help="Root URL to crawl.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to JSON/YAML config. Command-line flags override it.",
    )

    parser.add_argument(
        "--verbose",
        dest="verbose",
        action="store_true",
        default=None,
        help="Log each crawled URL and each problem as found (default).",
    )
    parser.add_argument(
        "--quiet",
        dest="verbose",
        action="store_false",
        help="Only print the final problem list.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Also log every discovered link and element id.",
    )

    parser.add_argument(
        "--external_links",
        dest="external_links",
        action="store_true",
        default=None,
        help="Check that off-site links exist (default).",
    )
    parser.add_argument(
        "--no_external_links",
        dest="external_links",
        action="store_false",
        help="Skip off-site links entirely.",
    )

    parser.add_argument("--timeout_seconds", type=float, default=None)
    parser.add_argument("--user_agent", type=str, default=None)

    parser.add_argument(
        "--log_file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    parser.add_argument(
        "--print_stats_json",
        action="store_true",
        help="Print full stats JSON to stderr after run.",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CheckConfig:
    payload: dict[str, Any] = {}
    if args.config is not None:
        payload = load_config_payload(args.config)

    if args.root is not None:
        payload["root"] = args.root
    if not payload.get("root"):
        raise ValueError("No root provided. Use --root or a config with 'root'.")

    if args.verbose is not None:
        payload["verbose"] = args.verbose
    if args.debug is not None:
        payload["debug"] = args.debug
    if args.external_links is not None:
        payload["external_links"] = args.external_links
    if args.timeout_seconds is not None:
        payload["timeout_seconds"] = args.timeout_seconds
    if args.user_agent is not None:
        payload["user_agent"] = args.user_agent

    return CheckConfig.from_dict(payload)


def setup_logging(*, verbose: bool, debug: bool, log_file: Path | None = None) -> None:
    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)

    # stdout is reserved for the problem list.
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))


def print_summary(result: CheckResult, *, print_stats_json: bool) -> None:
    stats = result.stats

    print("\n=== Link Check Complete ===", file=sys.stderr)
    print(f"root: {result.root}", file=sys.stderr)
    for key in [
        "admitted",
        "fetched",
        "fetch_problems",
        "links_found",
        "ids_found",
        "problems",
        "duration_seconds",
    ]:
        if key in stats:
            print(f"{key}: {stats[key]}", file=sys.stderr)

    if print_stats_json:
        print("\n--- Full Stats JSON ---", file=sys.stderr)
        print(json.dumps(stats, indent=JSON_INDENT, sort_keys=True), file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        config = build_config(args)
    except Exception as exc:
        setup_logging(verbose=True, debug=False, log_file=args.log_file)
        logging.error("Failed to build config: %s", exc)
        return EXIT_CONFIG_ERROR

    setup_logging(verbose=config.verbose, debug=config.debug, log_file=args.log_file)
    logging.info(
        "Starting link check: root=%s, external_links=%s",
        config.root,
        config.external_links,
    )

    try:
        result = LinkChecker(config).run()
    except KeyboardInterrupt:
        logging.error("Interrupted by user")
        return EXIT_INTERRUPTED

    result.emit(sys.stdout)

    if config.verbose or args.print_stats_json:
        print_summary(result, print_stats_json=args.print_stats_json)

    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
