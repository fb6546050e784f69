"""
Draft Clock Worker - Main Entry Point

RQ worker that executes scheduled auto-pick jobs. Runs the queue's built-in
scheduler so delayed jobs move to the queue when their pick clock expires.
"""
import logging

import redis
from rq import Queue, Worker

from config import get_config
from utils.logging import setup_logging


def main():
    """Main entry point."""
    config = get_config()
    setup_logging(config.log_level, config.log_dir)
    logger = logging.getLogger('draft_clock.worker')

    logger.info("Starting draft clock worker")
    logger.info(f"Environment: {config.environment}")
    logger.info(f"Queue: {config.queue_name} on {config.redis_url}")

    connection = redis.from_url(config.redis_url)
    worker = Worker([Queue(config.queue_name, connection=connection)], connection=connection)

    try:
        worker.work(with_scheduler=True, logging_level=config.log_level.upper())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
