import pytest
from pydantic import ValidationError

from giteahook.schemas.gitea import (
    GiteaCommentPayload,
    GiteaCommit,
    GiteaIssuePayload,
    GiteaUser,
)
from giteahook.schemas.webhook import (
    ACTION_EVENTS,
    CanonicalEventKind,
    actions_for,
)


def test_issue_payload_ignores_unknown_fields():
    payload = GiteaIssuePayload.model_validate(
        {
            "action": "opened",
            "number": 2,
            "issue": {
                "id": 7,
                "title": "Bug",
                "labels": [],
                "user": {"id": 1, "login": "carol", "avatar_url": "x"},
            },
            "repository": {"full_name": "acme/app", "private": False},
            "sender": {"id": 1},
        }
    )

    assert payload.issue.author_id == 1
    assert payload.issue.assignee_id is None
    assert payload.repository.full_name == "acme/app"


def test_issue_payload_requires_repository_name():
    with pytest.raises(ValidationError):
        GiteaIssuePayload.model_validate(
            {"action": "closed", "issue": {"id": 7}, "repository": {"full_name": ""}}
        )


def test_commit_author_handle():
    commit = GiteaCommit.model_validate(
        {"message": "m", "url": "u", "author": {"name": "", "username": "bob"}}
    )
    assert commit.author_handle == "bob"

    commit = GiteaCommit.model_validate({"message": "m", "url": "u", "author": None})
    assert commit.author_handle == ""


def test_user_handle_prefers_login():
    assert GiteaUser(login="alice", username="alice2").handle == "alice"
    assert GiteaUser(username="alice2").handle == "alice2"


def test_comment_payload_requires_comment():
    with pytest.raises(ValidationError):
        GiteaCommentPayload.model_validate(
            {"issue": {"id": 7}, "repository": {"full_name": "acme/app"}}
        )


def test_every_event_kind_has_a_label():
    for kind in CanonicalEventKind:
        assert kind.label.startswith("Gitea ")


def test_actions_for():
    assert actions_for(CanonicalEventKind.COMMIT) == ["CommentCreation", "TaskClose"]
    assert actions_for(CanonicalEventKind.ISSUE_OPENED) == ["TaskCreation"]
    bound = {kind for kinds in ACTION_EVENTS.values() for kind in kinds}
    assert bound == set(CanonicalEventKind)
