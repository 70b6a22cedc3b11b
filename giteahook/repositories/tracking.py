from typing import Optional

from sqlalchemy.orm import Session

from giteahook.models.tracking import (
    Project,
    ProjectRole,
    ProjectUserRole,
    Task,
    User,
)
from giteahook.repositories.base import BaseRepository

ASSIGNABLE_ROLES = (ProjectRole.MANAGER, ProjectRole.MEMBER)


class ProjectRepository(BaseRepository[Project]):
    """Repository for tracked projects"""

    def __init__(self):
        super().__init__(Project)

    def get_webhook_token(self, db: Session, project_id: int) -> Optional[str]:
        """Get the webhook token of a project, None if the project is unknown"""
        project = self.get(db, id=project_id)
        if project is None:
            return None
        return project.webhook_token


class TaskRepository(BaseRepository[Task]):
    """Repository for tracked tasks"""

    def __init__(self):
        super().__init__(Task)

    def get_by_reference(
        self, db: Session, project_id: int, reference: str
    ) -> Optional[Task]:
        """Get a project's task by its external reference"""
        return (
            db.query(self.model)
            .filter(Task.project_id == project_id, Task.reference == reference)
            .first()
        )


class UserRepository(BaseRepository[User]):
    """Repository for users"""

    def __init__(self):
        super().__init__(User)

    def get_by_username(self, db: Session, username: str) -> Optional[User]:
        return db.query(self.model).filter(User.username == username).first()


class ProjectRoleRepository:
    """Repository for project memberships"""

    def is_assignable(self, db: Session, project_id: int, user_id: int) -> bool:
        """Managers and members can own tasks, viewers cannot"""
        membership = (
            db.query(ProjectUserRole)
            .filter(
                ProjectUserRole.project_id == project_id,
                ProjectUserRole.user_id == user_id,
            )
            .first()
        )
        return membership is not None and membership.role in ASSIGNABLE_ROLES
