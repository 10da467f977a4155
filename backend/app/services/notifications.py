"""
Biodex Backend - Notification Queue
====================================

What:  Collects user-facing notifications raised while handling a request
       and moves them across the redirect that follows a mutation.
Why:   Mutations end with a full reload (303 redirect) of the enclosing page,
       so a notification has to survive exactly one round trip.
How:   The queue is a plain list during the request. `flash()` stores it in
       the signed session cookie (Starlette SessionMiddleware); `consume()`
       pops it when the next page renders.
"""

from typing import Any, Dict, List, Optional

from starlette.requests import Request

from app.schemas.common import Notification, NotificationVariant

_SESSION_KEY = "notifications"


class NotificationQueue:
    """Fire-and-forget notification sink handed to the species editor."""

    def __init__(self) -> None:
        self.items: List[Notification] = []

    def notify(
        self,
        title: str,
        description: str = "",
        variant: NotificationVariant = NotificationVariant.DEFAULT,
    ) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.items.append(notification)
        return notification

    def error(self, description: str) -> Notification:
        """Destructive notification with the generic failure headline."""
        return self.notify(
            "Something went wrong.",
            description,
            NotificationVariant.DESTRUCTIVE,
        )

    @property
    def last(self) -> Optional[Notification]:
        return self.items[-1] if self.items else None

    def __len__(self) -> int:
        return len(self.items)


def flash(request: Request, queue: NotificationQueue) -> None:
    """Persist queued notifications for the next rendered page."""
    if not queue.items:
        return
    pending: List[Dict[str, Any]] = list(request.session.get(_SESSION_KEY, []))
    pending.extend(n.model_dump(mode="json") for n in queue.items)
    request.session[_SESSION_KEY] = pending


def consume(request: Request) -> List[Notification]:
    """Pop every flashed notification (each one is shown once)."""
    pending = request.session.pop(_SESSION_KEY, [])
    return [Notification.model_validate(item) for item in pending]
