import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Callable, Dict, List

from fastapi.encoders import jsonable_encoder

from giteahook.schemas.webhook import CanonicalEvent, CanonicalEventKind

Subscriber = Callable[[CanonicalEvent], None]

logger = logging.getLogger(__name__)


class EventDispatcher(ABC):
    @abstractmethod
    def dispatch(self, event: CanonicalEvent) -> None:
        """Publish an event without waiting for subscribers' results"""
        pass


class LocalEventDispatcher(EventDispatcher):
    """Calls in-process subscribers registered per event kind"""

    def __init__(self):
        self._subscribers: Dict[CanonicalEventKind, List[Subscriber]] = defaultdict(
            list
        )
        self._warned_unsubscribed = False

    def subscribe(self, kind: CanonicalEventKind, callback: Subscriber) -> None:
        self._subscribers[kind].append(callback)

    def subscribers(self, kind: CanonicalEventKind) -> List[Subscriber]:
        return list(self._subscribers.get(kind, []))

    def dispatch(self, event: CanonicalEvent) -> None:
        if not any(self._subscribers.values()) and not self._warned_unsubscribed:
            # Warn once, the web process usually has no rules of its own
            logger.warning(
                "Local event sink has no subscribers, events are discarded. "
                "Set EVENT_SINK=celery to hand them to the worker."
            )
            self._warned_unsubscribed = True

        for callback in self.subscribers(event.kind):
            try:
                callback(event)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed on {event.kind.value}")


class CeleryEventDispatcher(EventDispatcher):
    """Queues events for the worker process"""

    def dispatch(self, event: CanonicalEvent) -> None:
        from giteahook.worker import handle_canonical_event

        handle_canonical_event.delay(
            event.kind.value, jsonable_encoder(event.attributes)
        )
        logger.debug(f"Queued {event.kind.value}")
