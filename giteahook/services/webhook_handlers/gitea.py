import logging
from typing import Any, Callable, Dict

from pydantic import ValidationError

from giteahook.schemas.gitea import (
    GiteaCommentPayload,
    GiteaCommit,
    GiteaIssue,
    GiteaIssuePayload,
)
from giteahook.schemas.webhook import (
    CanonicalEvent,
    CanonicalEventKind,
    IssueAction,
    RawWebhookEvent,
    WebhookEventType,
)
from giteahook.services.correlator import ReferenceCorrelator
from giteahook.services.dispatcher import EventDispatcher

from .base import WebhookHandler


class GiteaWebhookHandler(WebhookHandler):
    def __init__(
        self,
        correlator: ReferenceCorrelator,
        dispatcher: EventDispatcher,
        host_label: str = "Gitea",
    ):
        self.correlator = correlator
        self.dispatcher = dispatcher
        self.host_label = host_label
        self.logger = logging.getLogger(__name__)

        self._event_handlers: Dict[
            WebhookEventType, Callable[[int, Dict[str, Any]], bool]
        ] = {
            WebhookEventType.PUSH: self.handle_push,
            WebhookEventType.ISSUE: self.handle_issue_event,
            WebhookEventType.ISSUE_COMMENT: self.handle_comment_event,
            WebhookEventType.COMMENT: self.handle_comment_event,
        }
        self._issue_handlers: Dict[
            IssueAction, Callable[[int, GiteaIssue, str], bool]
        ] = {
            IssueAction.OPENED: self.handle_issue_opened,
            IssueAction.CLOSED: self.handle_issue_closed,
            IssueAction.REOPENED: self.handle_issue_reopened,
            IssueAction.ASSIGNED: self.handle_issue_assigned,
            IssueAction.UNASSIGNED: self.handle_issue_unassigned,
        }

    def process_webhook(self, event: RawWebhookEvent) -> bool:
        try:
            event_type = WebhookEventType(event.event_type)
        except ValueError:
            self.logger.debug(f"Ignoring unsupported Gitea event: {event.event_type}")
            return False

        return self._event_handlers[event_type](event.project_id, event.payload)

    def _dispatch(self, kind: CanonicalEventKind, attributes: Dict[str, Any]) -> None:
        self.dispatcher.dispatch(CanonicalEvent(kind=kind, attributes=attributes))
        target = attributes.get("reference") or attributes.get("task_id")
        self.logger.info(f"Dispatched {kind.value} for {target}")

    def _footer(self, text: str, url: str) -> str:
        return f"\n\n[{text}]({url})"

    def _attribution(self, prefix: str, username: str) -> str:
        if not username:
            return f"{prefix} someone on {self.host_label}"
        return f"{prefix} @{username} on {self.host_label}"

    def handle_push(self, project_id: int, payload: Dict[str, Any]) -> bool:
        commits = payload.get("commits") or []
        if not isinstance(commits, list):
            self.logger.warning("Push payload has a non-list commits field")
            return False

        results = [self.handle_commit(project_id, commit) for commit in commits]
        return any(results)

    def handle_commit(self, project_id: int, data: Any) -> bool:
        try:
            commit = GiteaCommit.model_validate(data)
        except ValidationError as e:
            self.logger.warning(f"Skipping malformed commit: {e}")
            return False

        task = self.correlator.resolve_task_by_embedded_id(commit.message, project_id)
        if task is None:
            return False

        comment = commit.message + self._footer(
            self._attribution("Commit made by", commit.author_handle), commit.url
        )
        attributes = task.model_dump()
        attributes.update(
            {
                "task_id": task.id,
                "commit_message": commit.message,
                "commit_url": commit.url,
                "comment": comment,
            }
        )
        self._dispatch(CanonicalEventKind.COMMIT, attributes)
        return True

    def handle_issue_event(self, project_id: int, payload: Dict[str, Any]) -> bool:
        try:
            action = IssueAction(payload.get("action"))
        except ValueError:
            self.logger.debug(f"Ignoring issue action: {payload.get('action')}")
            return False

        try:
            data = GiteaIssuePayload.model_validate(payload)
        except ValidationError as e:
            self.logger.warning(f"Skipping malformed issue payload: {e}")
            return False

        return self._issue_handlers[action](
            project_id, data.issue, data.repository.full_name
        )

    def handle_issue_opened(
        self, project_id: int, issue: GiteaIssue, repository: str
    ) -> bool:
        description = (issue.body or "") + self._footer(
            f"{self.host_label} Issue", issue.html_url
        )
        self._dispatch(
            CanonicalEventKind.ISSUE_OPENED,
            {
                "project_id": project_id,
                "reference": self.correlator.build_reference(repository, issue.id),
                "title": issue.title,
                "description": description,
                "assignee_id": issue.assignee_id,
                "author_id": issue.author_id,
            },
        )
        return True

    def handle_issue_closed(
        self, project_id: int, issue: GiteaIssue, repository: str
    ) -> bool:
        return self._handle_issue_state_change(
            CanonicalEventKind.ISSUE_CLOSED, project_id, issue, repository
        )

    def handle_issue_reopened(
        self, project_id: int, issue: GiteaIssue, repository: str
    ) -> bool:
        return self._handle_issue_state_change(
            CanonicalEventKind.ISSUE_REOPENED, project_id, issue, repository
        )

    def _handle_issue_state_change(
        self,
        kind: CanonicalEventKind,
        project_id: int,
        issue: GiteaIssue,
        repository: str,
    ) -> bool:
        reference = self.correlator.build_reference(repository, issue.id)
        task = self.correlator.resolve_task_by_reference(project_id, reference)
        if task is None:
            return False

        self._dispatch(
            kind,
            {
                "project_id": project_id,
                "task_id": task.id,
                "reference": reference,
                "assignee_id": issue.assignee_id,
                "author_id": issue.author_id,
            },
        )
        return True

    def handle_issue_assigned(
        self, project_id: int, issue: GiteaIssue, repository: str
    ) -> bool:
        if issue.assignee is None:
            return False

        reference = self.correlator.build_reference(repository, issue.id)
        user = self.correlator.resolve_user(issue.assignee.handle)
        task = self.correlator.resolve_task_by_reference(project_id, reference)

        if (
            user is None
            or task is None
            or not self.correlator.is_assignable(project_id, user.id)
        ):
            return False

        self._dispatch(
            CanonicalEventKind.ISSUE_ASSIGNEE_CHANGE,
            {
                "project_id": project_id,
                "task_id": task.id,
                "owner_id": user.id,
                "reference": reference,
            },
        )
        return True

    def handle_issue_unassigned(
        self, project_id: int, issue: GiteaIssue, repository: str
    ) -> bool:
        reference = self.correlator.build_reference(repository, issue.id)
        task = self.correlator.resolve_task_by_reference(project_id, reference)
        if task is None:
            return False

        self._dispatch(
            CanonicalEventKind.ISSUE_ASSIGNEE_CHANGE,
            {
                "project_id": project_id,
                "task_id": task.id,
                "owner_id": None,
                "reference": reference,
            },
        )
        return True

    def handle_comment_event(self, project_id: int, payload: Dict[str, Any]) -> bool:
        # Comments on pull requests or commits have no issue attached
        if not payload.get("issue"):
            return False

        try:
            data = GiteaCommentPayload.model_validate(payload)
        except ValidationError as e:
            self.logger.warning(f"Skipping malformed comment payload: {e}")
            return False

        reference = self.correlator.build_reference(
            data.repository.full_name, data.issue.id
        )
        task = self.correlator.resolve_task_by_reference(project_id, reference)
        if task is None:
            return False

        author = data.comment.user or data.sender
        username = (author.username or author.login) if author else ""

        user = self.correlator.resolve_user(username)
        if user is not None and not self.correlator.is_assignable(project_id, user.id):
            user = None

        comment = (data.comment.body or "") + self._footer(
            self._attribution("By", username), data.comment.html_url
        )
        self._dispatch(
            CanonicalEventKind.ISSUE_COMMENT,
            {
                "project_id": project_id,
                "reference": reference,
                "comment": comment,
                "user_id": user.id if user is not None else 0,
                "task_id": task.id,
            },
        )
        return True
