"""Task tracker tables read by the webhook correlator"""

import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from giteahook.core.database import Base


class ProjectRole(str, enum.Enum):
    MANAGER = "project-manager"
    MEMBER = "project-member"
    VIEWER = "project-viewer"


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    webhook_token = Column(String(255), nullable=True)

    tasks = relationship("Task", back_populates="project")
    roles = relationship("ProjectUserRole", back_populates="project")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=True)


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # "{repository}#{issue id}" for tasks created from Gitea issues
    reference = Column(String(255), nullable=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    project = relationship("Project", back_populates="tasks")


class ProjectUserRole(Base):
    __tablename__ = "project_has_users"

    project_id = Column(Integer, ForeignKey("projects.id"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    role = Column(Enum(ProjectRole), nullable=False, default=ProjectRole.MEMBER)

    project = relationship("Project", back_populates="roles")
