#!/usr/bin/env python3
"""FastAPI server runner."""

import structlog
import uvicorn

from pharosbet_core.api.app import create_app
from pharosbet_core.config import load_config
from pharosbet_core.logging import configure_logging

logger = structlog.get_logger()


def main(config_path: str | None = None):
    """Run the FastAPI server."""
    config = load_config(config_path)
    configure_logging(config.logging)

    logger.info("Starting FastAPI server", port=config.api.port, rpc_url=config.chain.rpc_url)

    try:
        uvicorn.run(
            create_app(config),
            host=config.api.host,
            port=config.api.port,
            log_config=None  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise


if __name__ == "__main__":
    main()
