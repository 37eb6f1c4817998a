"""
Initialization script for FinManager shared components.

This script builds the process-wide pieces every console session shares:
the session store, the per-session query caches and the HTTP connection pool.
"""

import logging
import os
from typing import Any, Dict

import requests

# Set up logging
from utils.logging_config import configure_logging

# Import configuration
from config.config_loader import load_config

from api.query_cache import CacheRegistry
from stores.session_store import create_session_store


def initialize_system(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Initialize the FinManager shared components.

    Args:
        config: System configuration

    Returns:
        Dict containing the session store, cache registry and HTTP session
    """
    logging.info("Initializing FinManager components")

    session_store = create_session_store(config)
    caches = CacheRegistry.from_config(config)
    http_session = requests.Session()

    storage_dir = config.get("session", {}).get("storage_dir")
    logging.info(f"Sessions stored {storage_dir or 'in memory'}, API at {config.get('api', {}).get('base_url')}")

    return {
        "session_store": session_store,
        "caches": caches,
        "http_session": http_session,
    }


def main():
    """Main entry point."""
    os.environ.setdefault('FINMANAGER_ENV', 'development')

    configure_logging(log_level='DEBUG')

    config = load_config()

    components = initialize_system(config)
    logging.info(f"Initialized components: {', '.join(components)}")
    components["http_session"].close()


if __name__ == "__main__":
    main()
