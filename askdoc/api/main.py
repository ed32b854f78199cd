"""
Server entrypoint for askdoc.

Architectural role:
- Configures process logging and serves `askdoc.api.http_api:app` with
  uvicorn.

Configuration:
- `PORT` (default 3000) and `HOST` (default 0.0.0.0).
- `DEBUG=true` lowers the log level to DEBUG.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os

import uvicorn


DEFAULT_PORT = 3000


def configure_logging() -> None:
    level = logging.DEBUG if os.getenv("DEBUG") == "true" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_port() -> int:
    """Return the listening port from `PORT`, falling back to the default."""
    value = os.getenv("PORT", "").strip()
    return int(value) if value else DEFAULT_PORT


def main():
    configure_logging()
    port = get_port()
    logging.getLogger(__name__).info("Server running on port %d", port)
    uvicorn.run(
        "askdoc.api.http_api:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
