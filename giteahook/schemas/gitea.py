"""
Gitea webhook payloads.

Only the fields the normalizer reads are declared; everything else Gitea sends
is ignored. Decoding failures surface as pydantic ValidationError and are
treated as "skip this event" by the handler.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class GiteaModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class GiteaUser(GiteaModel):
    id: Optional[int] = None
    login: str = ""
    username: str = ""
    full_name: str = ""

    @property
    def handle(self) -> str:
        return self.login or self.username


class GiteaRepository(GiteaModel):
    full_name: str

    @field_validator("full_name")
    @classmethod
    def full_name_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("repository full_name is empty")
        return value


class GiteaCommitAuthor(GiteaModel):
    name: str = ""
    username: str = ""
    email: str = ""


class GiteaCommit(GiteaModel):
    id: str = ""
    message: str
    url: str
    author: Optional[GiteaCommitAuthor] = None

    @property
    def author_handle(self) -> str:
        if self.author is None:
            return ""
        return self.author.name or self.author.username


class GiteaIssue(GiteaModel):
    id: int
    number: Optional[int] = None
    title: str = ""
    body: Optional[str] = ""
    html_url: str = ""
    user: Optional[GiteaUser] = None
    assignee: Optional[GiteaUser] = None

    @property
    def assignee_id(self) -> Optional[int]:
        return self.assignee.id if self.assignee else None

    @property
    def author_id(self) -> Optional[int]:
        return self.user.id if self.user else None


class GiteaComment(GiteaModel):
    id: Optional[int] = None
    body: Optional[str] = ""
    html_url: str = ""
    user: Optional[GiteaUser] = None


class GiteaIssuePayload(GiteaModel):
    action: str
    issue: GiteaIssue
    repository: GiteaRepository


class GiteaCommentPayload(GiteaModel):
    action: str = ""
    issue: GiteaIssue
    comment: GiteaComment
    repository: GiteaRepository
    sender: Optional[GiteaUser] = None
