"""Run the Readall API server."""

import argparse
from typing import Optional, Sequence

import uvicorn

from readall.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Readall API")
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind to (default: from config)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (default: from config)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the API server."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    host = args.host or settings.host
    port = args.port or settings.port

    print(f"Starting {settings.app_name} API on http://{host}:{port}")
    print(f"  - Health: http://{host}:{port}/api/health")

    uvicorn.run(
        "readall.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
