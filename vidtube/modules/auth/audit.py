"""Security event trail for session lifecycle changes."""

import json
import logging
from datetime import UTC, datetime
from typing import Optional

logger = logging.getLogger(__name__)

AUDIT_KEY = "auth:audit"
AUDIT_MAX_EVENTS = 10000


class AuditLog:
    """
    Records auth events to the log and, when available, to a capped Redis list.
    """

    def __init__(self, redis_client=None):
        """
        Initialize audit log.

        Args:
            redis_client: Optional async Redis client for the audit trail
        """
        self.redis = redis_client

    async def record(self, event_type: str, data: dict, correlation_id: Optional[str] = None):
        """
        Log security event for audit.

        Args:
            event_type: Type of security event
            data: Event data (never tokens or passwords)
            correlation_id: Optional request correlation ID
        """
        event = {
            "type": event_type,
            "data": data,
            "correlation_id": correlation_id,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        logger.info(f"auth event {event_type}: {data}")

        if not self.redis:
            return

        try:
            await self.redis.lpush(AUDIT_KEY, json.dumps(event))
            await self.redis.ltrim(AUDIT_KEY, 0, AUDIT_MAX_EVENTS - 1)
        except Exception as e:
            logger.error(f"Failed to write audit event {event_type}: {e}")
