"""Request dependencies for the process-wide objects created in app.main."""

from fastapi import Request

from app.core.cache import CacheLayer
from app.realtime.notifications import NotificationHub


def get_cache(request: Request) -> CacheLayer:
    return request.app.state.cache


def get_notification_hub(request: Request) -> NotificationHub:
    return request.app.state.notifications
