"""
Event logger utility for account events.
"""
from datetime import datetime
from typing import Optional
from fastapi import Request
import sys
import logging
import os

from ..config import settings

logger = logging.getLogger(__name__)

# Optional file sink next to the stdout handler configured in main
if settings.LOG_DIR:
    try:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(settings.LOG_DIR, "account_events.log"))
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s:%(message)s"))
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)


ALLOWED_EVENT_TYPES = {
    "user_created",
    "user_create_failure",
    "user_updated",
    "user_upserted",
    "login_success",
    "login_failure"
}


def client_ip(request: Request) -> Optional[str]:
    """Client address, falling back to the first X-Forwarded-For entry."""
    if request.client and request.client.host:
        return request.client.host

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded.split(",")[0].strip()
    return None


def log_account_event(
    event_type: str,
    username: Optional[str],
    request: Request,
    metadata: dict = None
) -> None:
    """
    Log an account event.

    Args:
        event_type: One of: user_created, user_create_failure, user_updated,
                    user_upserted, login_success, login_failure
        username: Username the request was about (may be missing on bad input)
        request: FastAPI Request object
        metadata: Optional dictionary of additional context

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    level = logging.WARNING if event_type.endswith("failure") else logging.INFO
    logger.log(
        level,
        "ACCOUNT %s username=%s ip=%s user_agent=%s timestamp=%s metadata=%s",
        event_type, username, client_ip(request), request.headers.get("user-agent"),
        datetime.utcnow().isoformat(), metadata or {}
    )
