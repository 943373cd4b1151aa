#!/usr/bin/env python3
"""Tasklist CalDAV Server - Simple startup script."""

import logging

from config import load_config
from presentation import create_app


def main():
    """Main entry point."""
    try:
        config = load_config()
        config.setup_logging()

        app = create_app(config)

        logger = logging.getLogger(__name__)
        logger.info("Starting Tasklist CalDAV Server...")
        logger.info(f"Server: http://{config.server.host}:{config.server.port}")
        logger.info(f"Time zone for zone-less timestamps: {config.service.timezone}")

        app.run(
            host=config.server.host,
            port=config.server.port,
            debug=config.server.debug,
            use_reloader=False
        )

    except KeyboardInterrupt:
        print("\nShutting down server...")
    except Exception as e:
        print(f"Failed to start server: {e}")
        raise


if __name__ == '__main__':
    main()
