"""
Command-line entry point.

Usage:
    python -m app serve [--host HOST] [--port PORT] [--reload]
    python -m app init-db
"""

import argparse
import logging

from app.core.config import settings
from app.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the API server."""
    import uvicorn

    logger.info("Starting %s at http://%s:%d", settings.project_name, args.host, args.port)
    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=args.reload)


def cmd_init_db(_args: argparse.Namespace) -> None:
    """Create the article store tables if they do not exist."""
    from app.infrastructure.markets.database import build_engine, create_schema

    engine = build_engine(settings.database_url)
    try:
        create_schema(engine)
    finally:
        engine.dispose()
    logger.info("Article store ready")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="app", description=settings.project_name)
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=cmd_serve)

    init_db = sub.add_parser("init-db", help="Create the article store tables")
    init_db.set_defaults(func=cmd_init_db)

    args = parser.parse_args(argv)
    configure_logging(level=settings.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
