import logging
from typing import Any, Dict

from celery import Celery

from giteahook.core.config import settings
from giteahook.schemas.webhook import CanonicalEvent, CanonicalEventKind
from giteahook.services.dispatcher import LocalEventDispatcher

celery = Celery("worker", broker=settings.REDIS_URL, backend=settings.REDIS_URL)

# Automation rules running in the worker subscribe here
automation_dispatcher = LocalEventDispatcher()

logger = logging.getLogger(__name__)


@celery.task(name="giteahook.worker.handle_canonical_event", ignore_result=True)
def handle_canonical_event(kind: str, attributes: Dict[str, Any]) -> None:
    event = CanonicalEvent(kind=CanonicalEventKind(kind), attributes=attributes)
    logger.info(f"Received {event.kind.value} from the queue")
    automation_dispatcher.dispatch(event)
