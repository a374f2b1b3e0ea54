import argparse
import sys

import uvicorn
from loguru import logger

from .exceptions import ConfigError
from .metrics import start_metrics_server
from .server import create_explorer_app
from .session import ExplorerSession
from .utils import load_config, setup_logging


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the EVM block explorer")
    parser.add_argument("--config", default="config.yml",
                        help="Config file name under chains/, or a path to one")
    parser.add_argument("--host", help="Override server.host")
    parser.add_argument("--port", type=int, help="Override server.port")
    return parser.parse_args(argv)

def main(argv=None) -> None:
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(f"Configuration error: {e.message}")
        sys.exit(1)

    setup_logging(config.logging.level, config.logging.to_file, config.logging.destination)
    logger.info(f"Exploring {config.chain.name} chain via {config.chain.rpc_url}")

    if config.metrics.enabled:
        start_metrics_server(config.metrics.port)

    session = ExplorerSession.from_settings(config)
    app = create_explorer_app(session)

    host = args.host or config.server.host
    port = args.port or config.server.port
    logger.info(f"Serving explorer on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Program interrupted by user. Exiting.")
