#!/usr/bin/env python3
"""Startup script for the Souq Discord bot."""

import sys
import logging

# Configure logging before imports
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("souq.log", encoding="utf-8"),
    ],
)
logger = logging.getLogger("souq")


def main() -> int:
    """Main entry point."""
    logger.info("Starting Souq bot...")

    from souq_client.config import config

    errors = config.validate(require_bot=True)
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        logger.error("Please check your .env file")
        return 1

    logger.info("Configuration validated")
    logger.info(f"GraphQL endpoint: {config.graphql_endpoint}")
    logger.info(f"Cache TTL: {config.cache_ttl_seconds}s")
    logger.info(f"Default ad placement: {config.default_ad_placement}")

    from souq_client.bot.client import run_bot

    try:
        run_bot()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
