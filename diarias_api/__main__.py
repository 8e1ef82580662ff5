"""Module executed when ``python -m diarias_api`` is invoked."""

from __future__ import annotations

import argparse
from typing import Sequence

import uvicorn

from .config import LOGGING_CONFIG


def main(argv: Sequence[str] | None = None) -> int:
    """Serve the roster store with uvicorn."""

    parser = argparse.ArgumentParser(prog="diarias_api", description="Run the roster store service.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(None if argv is None else list(argv))

    uvicorn.run("diarias_api.main:app", host=args.host, port=args.port, log_config=LOGGING_CONFIG)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
