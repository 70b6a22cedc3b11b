from abc import ABC, abstractmethod

from giteahook.schemas.webhook import RawWebhookEvent


class WebhookHandler(ABC):
    @abstractmethod
    def process_webhook(self, event: RawWebhookEvent) -> bool:
        """Convert a webhook delivery to canonical events and dispatch them.

        Returns True when at least one event was dispatched.
        """
        pass
