from __future__ import annotations

import argparse
import os

import uvicorn

from .main import app


def main() -> None:
    parser = argparse.ArgumentParser(description="Window Engine HTTP/WebSocket API")
    parser.add_argument("--host", default=os.environ.get("WINDOW_ENGINE_HOST", "127.0.0.1"), help="Bind address")
    parser.add_argument("--port", type=int, default=int(os.environ.get("WINDOW_ENGINE_PORT", "8089")), help="Bind port")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("WINDOW_ENGINE_LOG_LEVEL", "info"),
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="uvicorn log level",
    )
    args = parser.parse_args()
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
