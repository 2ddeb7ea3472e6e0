"""Main entry point for the pastewatch service."""

import argparse
import os
import sys
import time
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from pastewatch.config.environment import EnvironmentConfig
from pastewatch.config.exceptions import ConfigurationError
from pastewatch.config.loader import load_config, validate_config_file
from pastewatch.config.models import AppConfig
from pastewatch.delivery import ErrorWorker, OutputWorker, PasteWatchService, ShutdownCoordinator
from pastewatch.fetcher import PastebinClient
from pastewatch.logging import get_logger
from pastewatch.logging.config import configure_logging
from pastewatch.matching import KeywordMatcher, compile_patterns
from pastewatch.notifications import NotificationService
from pastewatch.pipeline import DedupCache, DeliveryRoute, PollLoop

logger = get_logger(__name__, component="cli")


def resolve_log_level(debug: bool, env_config: EnvironmentConfig, app_config: AppConfig) -> str:
    """Log level priority: --debug > LOG_LEVEL > config file."""
    if debug:
        return "DEBUG"
    if env_config.log_level:
        return env_config.log_level
    return app_config.logging.level


def build_service(
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    coordinator: ShutdownCoordinator,
    notifier: Optional[NotificationService] = None,
    client: Optional[PastebinClient] = None,
) -> PasteWatchService:
    """
    Wire the pipeline together.

    Raises:
        PatternCompileError: If a keyword cannot be compiled
    """
    scraper = app_config.scraper
    matcher = KeywordMatcher(compile_patterns(app_config.keywords))
    notifier = notifier or NotificationService(env_config, app_config.email)
    client = client or PastebinClient.from_config(scraper)

    output_route = DeliveryRoute("output")
    error_route = DeliveryRoute("error")

    poll_loop = PollLoop(
        client=client,
        matcher=matcher,
        cache=DedupCache(retention=timedelta(seconds=scraper.retention_seconds)),
        output_route=output_route,
        error_route=error_route,
        terminate_event=coordinator.terminate_event,
        cancel_event=coordinator.cancel_event,
        item_delay=scraper.item_delay_seconds,
    )

    return PasteWatchService(
        poll_loop=poll_loop,
        output_worker=OutputWorker(output_route, notifier, error_route),
        error_worker=ErrorWorker(error_route, notifier, mail_on_error=app_config.mail_on_error),
        coordinator=coordinator,
        interval_seconds=scraper.poll_interval_seconds,
        client=client,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pastewatch",
        description="pastewatch - watch Pastebin for keywords and mail the matches",
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the configuration file (YAML or JSON)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print debug output",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--once",
        action="store_true",
        help="Run a single poll cycle, deliver its results and exit",
    )
    mode.add_argument(
        "--check",
        action="store_true",
        help="Validate the configuration file and exit",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run pastewatch.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    start_time = time.time()
    args = parse_args(argv)

    if args.check:
        return 0 if validate_config_file(args.config) else 1

    load_dotenv()

    try:
        app_config, env_config = load_config(args.config)

        configure_logging(
            level=resolve_log_level(args.debug, env_config, app_config),
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        coordinator = ShutdownCoordinator()
        service = build_service(app_config, env_config, coordinator)

        logger.info(
            "Starting pastewatch",
            extra={
                "event": "service.starting",
                "config_path": str(args.config),
                "keyword_count": len(app_config.distinct_keywords()),
                "mail_on_error": app_config.mail_on_error,
                "once": args.once,
            },
        )

        coordinator.install()

        if args.once:
            result = service.run_once()
            exit_code = 1 if result.had_errors else 0
        else:
            service.run_forever()
            exit_code = 0

        logger.info(
            "pastewatch stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e.message}",
            extra={"event": "config.error", "error_type": type(e).__name__},
        )
        return 1
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
