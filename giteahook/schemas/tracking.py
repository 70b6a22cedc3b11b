from typing import Optional

from pydantic import BaseModel, ConfigDict


class TrackedTask(BaseModel):
    """Read-only view of a task owned by the task tracker"""

    id: int
    project_id: int
    title: str = ""
    description: Optional[str] = None
    reference: Optional[str] = None
    owner_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class StoreUser(BaseModel):
    id: int
    username: str
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
