#!/usr/bin/env python3
"""pagegrab CLI entrypoint."""

import sys
import argparse
import logging

from .bypass import ChallengeBypasser
from .downloader import FileDownloader
from .errors import ConfigError, PagegrabError
from .fetcher import PageFetcher
from .utils.config import ConfigManager
from .utils.http import create_session
from .utils.logging import LoggerFactory, log_with_context


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagegrab",
        description="Render pages, pass Cloudflare challenges and download files"
    )
    parser.add_argument(
        "-c", "--config",
        default="pagegrab.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--structured-logs",
        action="store_true",
        help="Emit logs as JSON lines"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_parser = subparsers.add_parser("fetch", help="Render a page and print its HTML")
    fetch_parser.add_argument("url", help="URL of the page")
    fetch_parser.add_argument("-o", "--output", help="Write the HTML to this file instead of stdout")
    fetch_parser.add_argument("--timeout", type=float, help="Browser session budget in seconds")

    download_parser = subparsers.add_parser("download", help="Download a file and print its path")
    download_parser.add_argument("file_url", help="Direct URL of the file")
    download_parser.add_argument("label", help="Label used to name the file")
    download_parser.add_argument("--bypass", metavar="URL",
                                 help="Pass the Cloudflare challenge for this URL first")
    download_parser.add_argument("-d", "--download-dir", help="Directory receiving the file")

    return parser


def run_fetch(args, settings) -> int:
    timeout = args.timeout if args.timeout is not None else settings['timeout']
    if timeout <= 0:
        raise ConfigError(f"--timeout must be greater than zero, got {timeout}")
    fetcher = PageFetcher(timeout=timeout, device=settings['device'], headless=settings['headless'])
    html = fetcher.fetch(args.url)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(html)
    else:
        sys.stdout.write(html)
    return 0


def run_download(args, settings, logger: logging.Logger) -> int:
    user_agent = settings['user_agent']
    downloader = FileDownloader(
        download_dir=args.download_dir or settings['download_dir'],
        user_agent=user_agent,
        extension=settings['file_extension'],
    )

    with create_session(user_agent) as session:
        if args.bypass:
            ChallengeBypasser(user_agent=user_agent).bypass(args.bypass, session)
        path = downloader.download(args.file_url, args.label, session)

    log_with_context(logger, logging.INFO, "File downloaded",
                     {'url': args.file_url, 'label': args.label, 'path': path})
    print(path)
    return 0


def main(argv=None) -> int:
    """Main entry point for pagegrab."""
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logger = LoggerFactory.create_logger(level=log_level, structured=args.structured_logs)

    try:
        settings = ConfigManager(args.config).get_settings()
    except PagegrabError as e:
        logger.error(str(e))
        return 1

    if settings['log_file']:
        logger = LoggerFactory.create_logger(
            level=log_level,
            output_file=settings['log_file'],
            structured=args.structured_logs,
            log_dir=settings['log_dir'],
        )

    try:
        if args.command == "fetch":
            return run_fetch(args, settings)
        return run_download(args, settings, logger)
    except PagegrabError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
