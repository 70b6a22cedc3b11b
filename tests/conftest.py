from typing import List
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from giteahook.core.database import Base, get_db
from giteahook.main import app
from giteahook.models import tracking  # noqa: F401 registers the tables
from giteahook.schemas.tracking import StoreUser, TrackedTask
from giteahook.schemas.webhook import CanonicalEvent, CanonicalEventKind
from giteahook.services.correlator import ReferenceCorrelator
from giteahook.services.dispatcher import LocalEventDispatcher
from giteahook.services.webhook_factory import WebhookHandlerFactory
from giteahook.services.webhook_handlers.gitea import GiteaWebhookHandler

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    del app.dependency_overrides[get_db]


@pytest.fixture
def dispatched() -> List[CanonicalEvent]:
    """Collects every event published on the local sink used by the app"""
    WebhookHandlerFactory.initialize()
    dispatcher = WebhookHandlerFactory.get_dispatcher("local")
    events: List[CanonicalEvent] = []
    for kind in CanonicalEventKind:
        dispatcher.subscribe(kind, events.append)
    yield events
    WebhookHandlerFactory.initialize()


class FakeTaskStore:
    def __init__(self, tasks: List[TrackedTask]):
        self.tasks = tasks

    def get_by_id(self, task_id):
        return next((t for t in self.tasks if t.id == task_id), None)

    def get_by_reference(self, project_id, reference):
        return next(
            (
                t
                for t in self.tasks
                if t.project_id == project_id and t.reference == reference
            ),
            None,
        )


class FakeUserStore:
    def __init__(self, users: List[StoreUser]):
        self.users = users

    def get_by_username(self, username):
        return next((u for u in self.users if u.username == username), None)


class FakePermissionStore:
    def __init__(self, assignable):
        self.assignable = assignable

    def is_assignable(self, project_id, user_id):
        return (project_id, user_id) in self.assignable


@pytest.fixture
def tasks():
    return [
        TrackedTask(id=12, project_id=5, title="Fix login", reference="acme/app#7"),
        TrackedTask(id=13, project_id=5, title="Write docs"),
        TrackedTask(id=40, project_id=9, title="Other project task"),
    ]


@pytest.fixture
def users():
    return [
        StoreUser(id=3, username="alice", name="Alice"),
        StoreUser(id=4, username="bob", name="Bob"),
    ]


@pytest.fixture
def correlator(tasks, users):
    # alice may own tasks in project 5, bob only watches it
    return ReferenceCorrelator(
        tasks=FakeTaskStore(tasks),
        users=FakeUserStore(users),
        permissions=FakePermissionStore({(5, 3)}),
    )


@pytest.fixture
def dispatcher():
    return Mock(spec=LocalEventDispatcher)


@pytest.fixture
def gitea_handler(correlator, dispatcher):
    return GiteaWebhookHandler(correlator, dispatcher)


@pytest.fixture
def tracker(db):
    """Project 5 with alice as member, bob as viewer and one task from acme/app#7"""
    from giteahook.models.tracking import (
        Project,
        ProjectRole,
        ProjectUserRole,
        Task,
        User,
    )

    db.add_all(
        [
            Project(id=5, name="App", webhook_token="s3cret"),
            Project(id=9, name="Other", webhook_token=None),
            User(id=3, username="alice", name="Alice"),
            User(id=4, username="bob", name="Bob"),
        ]
    )
    db.flush()
    db.add_all(
        [
            ProjectUserRole(project_id=5, user_id=3, role=ProjectRole.MEMBER),
            ProjectUserRole(project_id=5, user_id=4, role=ProjectRole.VIEWER),
            Task(id=12, project_id=5, title="Fix login", reference="acme/app#7"),
            Task(id=13, project_id=5, title="Write docs"),
            Task(id=40, project_id=9, title="Other project task"),
        ]
    )
    db.commit()
    return db
