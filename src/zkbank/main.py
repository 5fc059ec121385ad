"""Application entry point for the zkBank API server."""

from __future__ import annotations

import uvicorn

from zkbank.config.settings import AppConfig


def main() -> None:
    """Start the zkBank API server."""
    config = AppConfig()
    uvicorn.run(
        "zkbank.api.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
        log_level=config.server.log_level.value,
    )


if __name__ == "__main__":
    main()
