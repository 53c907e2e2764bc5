"""Run the file storage server: ``python -m filestore [--config PATH]``."""
import argparse
import logging
import sys
from pathlib import Path

import uvicorn

from .config import CONFIG_FILE, ConfigError, load_config
from .main import configure_logging, create_app

logger = logging.getLogger("filestore")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="File storage server")
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_FILE,
        help=f"Path to the JSON or YAML config file (default: {CONFIG_FILE})",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.critical("Error loading config: %s", e)
        return 1

    configure_logging(config.logging.level)
    app = create_app(config)

    logger.info("Server listening on port %d", config.server.port)
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
