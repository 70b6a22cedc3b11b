"""Correlator stores backed by the task tracker database"""

from typing import Optional

from sqlalchemy.orm import Session

from giteahook.repositories.tracking import (
    ProjectRoleRepository,
    TaskRepository,
    UserRepository,
)
from giteahook.schemas.tracking import StoreUser, TrackedTask


class SqlTaskStore:
    def __init__(self, db: Session):
        self.db = db
        self.repository = TaskRepository()

    def get_by_id(self, task_id: int) -> Optional[TrackedTask]:
        task = self.repository.get(self.db, id=task_id)
        return TrackedTask.model_validate(task) if task else None

    def get_by_reference(
        self, project_id: int, reference: str
    ) -> Optional[TrackedTask]:
        task = self.repository.get_by_reference(self.db, project_id, reference)
        return TrackedTask.model_validate(task) if task else None


class SqlUserStore:
    def __init__(self, db: Session):
        self.db = db
        self.repository = UserRepository()

    def get_by_username(self, username: str) -> Optional[StoreUser]:
        user = self.repository.get_by_username(self.db, username)
        return StoreUser.model_validate(user) if user else None


class SqlPermissionStore:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ProjectRoleRepository()

    def is_assignable(self, project_id: int, user_id: int) -> bool:
        return self.repository.is_assignable(self.db, project_id, user_id)
