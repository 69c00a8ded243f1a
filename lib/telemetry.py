# =============================================================================
# lib/telemetry.py - Diagnostic Event Capture
# =============================================================================
# Ships diagnostic events to an external collector.
#
# Every event is written to the "telemetry" logger, then published as JSON on
# a Redis pub/sub channel that the collector subscribes to. Publishing is
# best-effort: a Redis outage is logged and never surfaces to the caller.
#
# Events:
#   - auth_error: A sign-in or sign-up attempt failed (sanitized + raw message)
#   - auth_exception: The failure was an exception (includes the traceback)
# =============================================================================

import json
import logging
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


def get_redis_client():
    """Get a Redis client for pub/sub operations."""
    import redis
    from app.config import settings
    return redis.from_url(settings.REDIS_URL)


def capture(event: str, properties: dict[str, Any]) -> bool:
    """
    Record a diagnostic event.

    Args:
        event: Event name (auth_error, auth_exception)
        properties: Event payload; values must be JSON-serialisable

    Returns:
        bool: True if the event was published to Redis
    """
    from app.config import settings

    record = {
        "event": event,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "properties": properties,
    }

    logger.info(f"Telemetry event {event}: {properties}")

    if not settings.TELEMETRY_ENABLED:
        return False

    try:
        client = get_redis_client()
        client.publish(settings.TELEMETRY_CHANNEL, json.dumps(record, default=str))
        logger.debug(f"Published telemetry event {event}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish telemetry event {event}: {e}")
        return False
