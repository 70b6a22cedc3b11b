from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class WebhookProvider(str, Enum):
    GITEA = "gitea"


class WebhookEventType(str, Enum):
    """Values of the X-Gitea-Event header we understand"""

    PUSH = "push"
    ISSUE = "issues"
    ISSUE_COMMENT = "issue_comment"
    COMMENT = "comment"


class IssueAction(str, Enum):
    OPENED = "opened"
    CLOSED = "closed"
    REOPENED = "reopened"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"


class CanonicalEventKind(str, Enum):
    """Events published to the automation engine, values are dispatcher topics"""

    COMMIT = "gitea.webhook.commit"
    ISSUE_OPENED = "gitea.webhook.issue.opened"
    ISSUE_CLOSED = "gitea.webhook.issue.closed"
    ISSUE_REOPENED = "gitea.webhook.issue.reopened"
    ISSUE_COMMENT = "gitea.webhook.issue.commented"
    ISSUE_ASSIGNEE_CHANGE = "gitea.webhook.issue.assignee"

    @property
    def label(self) -> str:
        return EVENT_LABELS[self]


EVENT_LABELS: Dict[CanonicalEventKind, str] = {
    CanonicalEventKind.COMMIT: "Gitea commit received",
    CanonicalEventKind.ISSUE_OPENED: "Gitea issue opened",
    CanonicalEventKind.ISSUE_CLOSED: "Gitea issue closed",
    CanonicalEventKind.ISSUE_REOPENED: "Gitea issue reopened",
    CanonicalEventKind.ISSUE_ASSIGNEE_CHANGE: "Gitea issue assignee change",
    CanonicalEventKind.ISSUE_COMMENT: "Gitea issue comment created",
}

# Automation actions that can be triggered by each event
ACTION_EVENTS: Dict[str, List[CanonicalEventKind]] = {
    "CommentCreation": [
        CanonicalEventKind.ISSUE_COMMENT,
        CanonicalEventKind.COMMIT,
    ],
    "TaskAssignUser": [CanonicalEventKind.ISSUE_ASSIGNEE_CHANGE],
    "TaskClose": [
        CanonicalEventKind.COMMIT,
        CanonicalEventKind.ISSUE_CLOSED,
    ],
    "TaskCreation": [CanonicalEventKind.ISSUE_OPENED],
    "TaskOpen": [CanonicalEventKind.ISSUE_REOPENED],
}


def actions_for(kind: CanonicalEventKind) -> List[str]:
    return [action for action, kinds in ACTION_EVENTS.items() if kind in kinds]


class RawWebhookEvent(BaseModel):
    """A single webhook delivery, already authenticated for project_id"""

    event_type: str  # e.g. "push", "issues"; unknown values are ignored
    project_id: int
    payload: Dict[str, Any]


class CanonicalEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: CanonicalEventKind
    attributes: Dict[str, Any] = Field(default_factory=dict)


class EventDescription(BaseModel):
    kind: CanonicalEventKind
    label: str
    actions: List[str]
