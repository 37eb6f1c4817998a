#!/usr/bin/env python3
"""
FinManager: financial management admin console.
Main application entry point with support for various run modes.

Usage:
    python main.py [options]

Run modes:
    - server: Run the web console (default)
    - cli: Run the interactive command line console
"""

import argparse
import logging
import os
import signal
import sys
from typing import Any, Dict

# Import configuration
from config.config_loader import load_config

# Configure logging
from utils.logging_config import configure_logging

# Import system initialization
from initialize_services import initialize_system

from utils.error_handling import ConfigurationError

# Version
__version__ = "1.0.0"

# Run modes
RUN_MODE_SERVER = "server"
RUN_MODE_CLI = "cli"


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="FinManager: financial management admin console",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("--env", help="Environment (development, staging, production)", default=None)
    parser.add_argument("--log-level", help="Logging level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], default=None)
    parser.add_argument("--mode", help="Run mode", choices=[RUN_MODE_SERVER, RUN_MODE_CLI], default=RUN_MODE_SERVER)
    parser.add_argument("--host", help="Host for server mode", default=None)
    parser.add_argument("--port", help="Port for server mode", type=int, default=None)
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    return parser.parse_args()


def run_server_mode(config: Dict[str, Any], args: argparse.Namespace, components: Dict[str, Any]) -> None:
    """Run the web console."""
    import uvicorn

    from console.app import create_app

    logger = logging.getLogger(__name__)
    server = config.get("server", {})
    host = args.host or server.get("host", "127.0.0.1")
    port = args.port or int(server.get("port", 3000))
    logger.info(f"Starting FinManager console on {host}:{port}")

    app = create_app(
        config,
        session_store=components["session_store"],
        caches=components["caches"],
        http_session=components["http_session"],
    )
    uvicorn.run(app, host=host, port=port, log_level=(args.log_level or "INFO").lower())


def run_cli_mode(config: Dict[str, Any], args: argparse.Namespace, components: Dict[str, Any]) -> None:
    """Run in command line interface mode."""
    from cli.cli_app import run_cli

    logger = logging.getLogger(__name__)
    logger.info("Starting FinManager CLI")
    run_cli(config=config)


def setup_signal_handlers(components: Dict[str, Any]) -> None:
    """Set up signal handlers for graceful shutdown.

    Args:
        components: Shared console components
    """
    def handle_signal(sig, frame):
        logger = logging.getLogger(__name__)
        logger.info(f"Received signal {sig}, shutting down...")
        components["http_session"].close()
        sys.exit(0)

    signal.signal(signal.SIGTERM, handle_signal)


def main():
    """Main application entry point."""
    args = parse_arguments()

    if args.version:
        print(f"FinManager version {__version__}")
        sys.exit(0)

    if args.env:
        os.environ["FINMANAGER_ENV"] = args.env

    # Logging starts at the requested level and is reconfigured once the config is loaded
    configure_logging(log_level=args.log_level or "INFO")
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info(f"FinManager v{__version__} - Financial management console")
    logger.info("=" * 60)

    try:
        config = load_config(env=args.env)
    except ConfigurationError as e:
        logger.error(f"Cannot start: {e.message}")
        sys.exit(1)

    logging_config = config.get("logging", {})
    configure_logging(log_level=args.log_level or logging_config.get("level"),
                      log_file=logging_config.get("file"))
    logger.info(f"Starting FinManager in {config['environment']} mode")

    components = initialize_system(config)
    setup_signal_handlers(components)

    if args.mode == RUN_MODE_SERVER:
        run_server_mode(config, args, components)
    elif args.mode == RUN_MODE_CLI:
        run_cli_mode(config, args, components)
    else:
        # Should never happen due to argparse choices
        logger.error(f"Unknown run mode: {args.mode}")
        sys.exit(1)

    logger.info("FinManager shutdown complete")


if __name__ == "__main__":
    main()
