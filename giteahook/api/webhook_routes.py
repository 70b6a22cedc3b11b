import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from giteahook.core.database import get_db
from giteahook.schemas.webhook import (
    CanonicalEventKind,
    EventDescription,
    RawWebhookEvent,
    WebhookProvider,
    actions_for,
)
from giteahook.services.tokens import check_webhook_token
from giteahook.services.webhook_factory import WebhookHandlerFactory

router = APIRouter(prefix="/webhook/gitea", tags=["webhooks"])
logger = logging.getLogger(__name__)


@router.get("/events", response_model=List[EventDescription])
def list_events():
    """Events this integration publishes and the actions they can trigger"""
    return [
        EventDescription(kind=kind, label=kind.label, actions=actions_for(kind))
        for kind in CanonicalEventKind
    ]


@router.post("/{project_id}/{token}")
async def webhook_handler(
    project_id: int,
    token: str,
    request: Request,
    x_gitea_event: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    if not check_webhook_token(db, project_id, token):
        raise HTTPException(status_code=401, detail="Invalid webhook token")

    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Expected a JSON object")

    event = RawWebhookEvent(
        event_type=x_gitea_event or "", project_id=project_id, payload=payload
    )

    try:
        handler = WebhookHandlerFactory.get_handler(WebhookProvider.GITEA, db)
        parsed = handler.process_webhook(event)
    except SQLAlchemyError:
        logger.exception(f"Lookup failed, dropping {event.event_type} event")
        parsed = False

    logger.debug(f"Gitea {event.event_type} event for project {project_id}: {parsed}")

    # Every delivery is acknowledged the same way
    return {"status": "parsed"}
