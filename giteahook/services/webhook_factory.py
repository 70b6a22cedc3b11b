from typing import Dict, Optional

from sqlalchemy.orm import Session

from giteahook.core.config import get_settings
from giteahook.schemas.webhook import WebhookProvider
from giteahook.services.correlator import ReferenceCorrelator
from giteahook.services.dispatcher import (
    CeleryEventDispatcher,
    EventDispatcher,
    LocalEventDispatcher,
)
from giteahook.services.stores import SqlPermissionStore, SqlTaskStore, SqlUserStore
from giteahook.services.webhook_handlers.base import WebhookHandler
from giteahook.services.webhook_handlers.gitea import GiteaWebhookHandler


class WebhookHandlerFactory:
    _dispatchers: Dict[str, EventDispatcher] = {}

    @classmethod
    def initialize(cls):
        cls._dispatchers = {
            "local": LocalEventDispatcher(),
            "celery": CeleryEventDispatcher(),
        }

    @classmethod
    def get_dispatcher(cls, sink: Optional[str] = None) -> EventDispatcher:
        if not cls._dispatchers:
            cls.initialize()
        sink = sink or get_settings().EVENT_SINK
        if sink not in cls._dispatchers:
            raise KeyError(f"No event sink registered with name: {sink}")
        return cls._dispatchers[sink]

    @classmethod
    def get_handler(cls, provider: WebhookProvider, db: Session) -> WebhookHandler:
        if provider != WebhookProvider.GITEA:
            raise KeyError(f"No handler registered for provider: {provider}")

        correlator = ReferenceCorrelator(
            tasks=SqlTaskStore(db),
            users=SqlUserStore(db),
            permissions=SqlPermissionStore(db),
        )
        return GiteaWebhookHandler(
            correlator,
            cls.get_dispatcher(),
            host_label=get_settings().GITEA_HOST_LABEL,
        )
