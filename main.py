# main.py

"""pricescout entry point.

``python main.py``                 serve the search API (uvicorn)
``python main.py QUERY [-p ...]``  one headless search, JSON or table
``python main.py --health``        homepage reachability table
"""

import argparse
import asyncio
import logging
import sys

from pricescout.config.logging_config import setup_logging
from pricescout.config.settings import Settings

logger = logging.getLogger("pricescout.main")


def _build_parser() -> argparse.ArgumentParser:
    platform_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="pricescout",
        description=(
            "Search Indian e-commerce sites in parallel with a "
            "headless browser."
        ),
        epilog=f"Platforms: {platform_ids}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search once and print the results. Omit to serve the API.",
    )

    search = parser.add_argument_group("search")
    search.add_argument(
        "-p",
        "--platforms",
        default=None,
        help="Comma-separated platform ids (default: all).",
    )
    search.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Result format on stdout (default: json).",
    )

    server = parser.add_argument_group("server")
    server.add_argument(
        "--host",
        default="0.0.0.0",
        help="Interface to bind (default: 0.0.0.0).",
    )
    server.add_argument(
        "--port",
        type=int,
        default=Settings.PORT,
        help=f"Port to listen on (default: {Settings.PORT}).",
    )

    parser.add_argument(
        "--health",
        action="store_true",
        help="Probe every platform homepage and exit.",
    )
    return parser


def serve(host: str, port: int) -> None:
    """Run the FastAPI app until interrupted."""
    import uvicorn

    logger.info("Starting API server on %s:%d (%s)", host, port, Settings.ENV)
    try:
        uvicorn.run(
            "pricescout.api.app:app",
            host=host,
            port=port,
            log_level=Settings.LOG_LEVEL.lower(),
        )
    except Exception:
        logger.critical("API server crashed", exc_info=True)
        raise
    finally:
        logger.info("API server stopped")


def main() -> None:
    """Dispatch to the server, a one-off search, or the health probe."""
    log_file = setup_logging()
    args = _build_parser().parse_args()
    logger.debug("Arguments: %s, log file: %s", vars(args), log_file)

    if args.health:
        from pricescout.cli.runner import run_health_check

        sys.exit(asyncio.run(run_health_check()))

    if args.query is None:
        serve(args.host, args.port)
        return

    from pricescout.cli.runner import cli_search

    sys.exit(
        asyncio.run(
            cli_search(
                query=args.query,
                platforms_csv=args.platforms,
                output_format=args.output_format,
            )
        )
    )


if __name__ == "__main__":
    main()
