#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Celery Worker Entry Point
# =============================================================================
# Starts a Celery worker that consumes the default and accounts queues, where
# new-account setup tasks are routed.
#
# Usage:
#   python scripts/start_worker.py
#
#   # Or use Celery CLI directly
#   celery -A workers.celery_app worker -Q default,accounts --loglevel=info
#
# Prerequisites:
#   - Redis must be running (REDIS_URL)
#   - Supabase environment variables must be set (.env file)
# =============================================================================

import logging

from workers.celery_app import celery_app

logger = logging.getLogger(__name__)


def main():
    """Start the Celery worker."""
    logger.info("Starting Meal Planner worker (queues: default, accounts)")

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        "--queues=default,accounts",
        "--concurrency=2",
    ])


if __name__ == "__main__":
    main()
