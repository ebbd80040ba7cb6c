"""Main entry point for the fishing simulation.

This module provides command-line options to run the simulation:
- Web mode (default): FastAPI backend hosting one session
- Headless mode: auto-play, faster than realtime, summary only
"""

import argparse
import logging
import sys

from backend.logging_config import configure_logging

logger = logging.getLogger(__name__)


def run_web_server(port=None):
    """Run the web server hosting the session."""
    import uvicorn

    from backend.app_factory import AppContext, create_app

    context = AppContext()
    if port is not None:
        context.api_port = port

    logger.info("Starting FastAPI backend on port %d", context.api_port)
    logger.info("API docs available at http://localhost:%d/docs", context.api_port)
    uvicorn.run(create_app(context=context), host="0.0.0.0", port=context.api_port)


def main(argv=None):
    """Parse command-line arguments and run the appropriate mode."""
    parser = argparse.ArgumentParser(
        description="Angler fishing loop simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run web server (default)
  python main.py

  # Ten simulated minutes of auto-play
  python main.py --headless --seconds 600

  # Reproducible run with exported stats
  python main.py --headless --seconds 3600 --seed 42 --export-stats run.json
        """,
    )
    parser.add_argument("--headless", action="store_true", help="Run auto-play without a server")
    parser.add_argument(
        "--seconds",
        type=float,
        default=600.0,
        help="Simulated seconds in headless mode (default: 600)",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for deterministic behavior (optional)"
    )
    parser.add_argument(
        "--stats-interval",
        type=float,
        default=60.0,
        help="Log progress every N simulated seconds in headless mode (default: 60)",
    )
    parser.add_argument(
        "--export-stats",
        type=str,
        default=None,
        metavar="FILENAME",
        help="Write the headless summary to a JSON file",
    )
    parser.add_argument("--port", type=int, default=None, help="Server port (web mode)")
    parser.add_argument("--log-level", default=None, help="Log level (default: ANGLER_LOG_LEVEL or INFO)")

    args = parser.parse_args(argv)
    configure_logging(level=args.log_level, headless=args.headless)

    if args.headless:
        from angler.headless import run_headless

        if args.seconds <= 0:
            parser.error("--seconds must be positive")
        logger.info("Starting headless run: %.0fs, seed=%s", args.seconds, args.seed)
        run_headless(
            args.seconds,
            seed=args.seed,
            stats_interval=args.stats_interval,
            export_stats=args.export_stats,
        )
        return 0

    run_web_server(port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
