from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, List

from .utils.logging import get_logger

logger = get_logger("feedrelay.activity")


@dataclass(slots=True, frozen=True)
class Activity:
    action: str
    target_title: str
    target_link: str
    source_id: str
    user: str = "Anonymous Reader"
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: float = field(default_factory=time.time)


ActivityListener = Callable[[Activity], None]


class ActivityBroadcaster:
    """One-way reader activity notifications.

    The pipeline announces what it opens; transports (peer rooms, websockets)
    subscribe as listeners. A failing listener never affects the caller.
    """

    def __init__(self) -> None:
        self._listeners: List[ActivityListener] = []

    def subscribe(self, listener: ActivityListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def announce(self, action: str, target_title: str, target_link: str, source_id: str) -> Activity:
        activity = Activity(
            action=action,
            target_title=target_title,
            target_link=target_link,
            source_id=source_id,
        )
        logger.debug("Activity %s: %s (%s)", action, target_title, source_id)
        for listener in list(self._listeners):
            try:
                listener(activity)
            except Exception as exc:  # noqa: BLE001 - notifications are fire-and-forget
                logger.warning("Activity listener failed: %s", exc)
        return activity
