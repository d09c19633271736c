from __future__ import annotations

import functools
import logging
import time
from typing import Callable

from bizledger.domain.errors import AppError
from bizledger.domain.models import Notification, NotificationKind, new_id

log = logging.getLogger("bizledger.notifications")

Subscriber = Callable[[Notification], None]


class NotificationBus:
    """User-facing messages with a fixed time-to-live.

    Nothing is scheduled: expired entries are evicted whenever the active
    list is read, using the injected clock.
    """

    def __init__(self, ttl_seconds: float = 3.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = float(ttl_seconds)
        self.clock = clock
        self._notifications: list[Notification] = []
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def show(self, message: str, kind: NotificationKind | str = NotificationKind.INFO) -> Notification:
        self.expire()
        notification = Notification(
            id=new_id(),
            message=message,
            kind=NotificationKind(kind),
            created_at=self.clock(),
        )
        self._notifications.append(notification)
        level = logging.WARNING if notification.kind is NotificationKind.ERROR else logging.INFO
        log.log(level, "notification kind=%s message=%s", notification.kind.value, message)

        for callback in list(self._subscribers):
            try:
                callback(notification)
            except Exception:
                log.exception("notification_subscriber_failed id=%s", notification.id)
        return notification

    def remove(self, notification_id: str) -> None:
        self._notifications = [n for n in self._notifications if n.id != notification_id]

    def expire(self) -> int:
        now = self.clock()
        kept = [n for n in self._notifications if now - n.created_at < self.ttl_seconds]
        removed = len(self._notifications) - len(kept)
        self._notifications = kept
        return removed

    def active(self) -> list[Notification]:
        self.expire()
        return list(self._notifications)

    def clear(self) -> None:
        self._notifications = []


def reports_failures(method):
    """Publish an error notification for any AppError, then re-raise it."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except AppError as e:
            self.notifier.show(str(e), NotificationKind.ERROR)
            raise

    return wrapper
