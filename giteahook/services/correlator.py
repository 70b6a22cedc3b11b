import logging
import re
from typing import Optional, Protocol

from giteahook.schemas.tracking import StoreUser, TrackedTask

# Task ids are written "#123" in commit messages
TASK_ID_PATTERN = re.compile(r"#(\d+)")
# Largest id the task store can hold (signed 64-bit integer column)
MAX_TASK_ID = 2**63 - 1


class TaskStore(Protocol):
    def get_by_id(self, task_id: int) -> Optional[TrackedTask]: ...

    def get_by_reference(
        self, project_id: int, reference: str
    ) -> Optional[TrackedTask]: ...


class UserStore(Protocol):
    def get_by_username(self, username: str) -> Optional[StoreUser]: ...


class PermissionStore(Protocol):
    def is_assignable(self, project_id: int, user_id: int) -> bool: ...


def build_reference(repository_full_name: str, upstream_item_id) -> str:
    """Key linking a Gitea issue to a tracked task, e.g. "org/repo#42" """
    return f"{repository_full_name}#{upstream_item_id}"


def extract_task_id(text: str) -> Optional[int]:
    match = TASK_ID_PATTERN.search(text or "")
    if match is None:
        return None
    task_id = int(match.group(1))
    if task_id > MAX_TASK_ID:
        return None
    return task_id


class ReferenceCorrelator:
    """Matches Gitea issues, commits and users against the task tracker"""

    def __init__(
        self,
        tasks: TaskStore,
        users: UserStore,
        permissions: PermissionStore,
    ):
        self.tasks = tasks
        self.users = users
        self.permissions = permissions
        self.logger = logging.getLogger(__name__)

    def build_reference(self, repository_full_name: str, upstream_item_id) -> str:
        return build_reference(repository_full_name, upstream_item_id)

    def resolve_task_by_reference(
        self, project_id: int, reference: str
    ) -> Optional[TrackedTask]:
        task = self.tasks.get_by_reference(project_id, reference)
        if task is None:
            self.logger.debug(
                f"No task with reference {reference} in project {project_id}"
            )
        return task

    def resolve_task_by_embedded_id(
        self, text: str, project_id: int
    ) -> Optional[TrackedTask]:
        """
        Find the task referenced as "#<id>" in text.

        Returns None when there is no marker, the task does not exist or it
        belongs to another project.
        """
        task_id = extract_task_id(text)
        if task_id is None:
            return None

        task = self.tasks.get_by_id(task_id)
        if task is None:
            self.logger.debug(f"Task #{task_id} not found")
            return None

        if task.project_id != project_id:
            self.logger.debug(
                f"Task #{task_id} belongs to project {task.project_id}, not {project_id}"
            )
            return None

        return task

    def resolve_user(self, username: str) -> Optional[StoreUser]:
        if not username:
            return None
        return self.users.get_by_username(username)

    def is_assignable(self, project_id: int, user_id: int) -> bool:
        return self.permissions.is_assignable(project_id, user_id)
