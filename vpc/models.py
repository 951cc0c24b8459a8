"""Shared pydantic models: the values handed from one pipeline stage to the next."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class EventKind(str, Enum):
    PULL_REQUEST = "pull_request"
    PUSH = "push"
    OTHER = "other"

    @classmethod
    def from_event_name(cls, event_name: str) -> "EventKind":
        try:
            return cls(event_name)
        except ValueError:
            return cls.OTHER


class TriggerContext(BaseModel):
    """Everything the pipeline needs to know about the CI event that started it."""

    model_config = ConfigDict(frozen=True)

    event_kind: EventKind
    event_name: str  # raw GITHUB_EVENT_NAME
    branch: str
    message: str
    actor: str
    owner: str
    repo: str
    repo_id: int | None = None
    sha: str  # GITHUB_SHA; the merge commit for pull requests
    head_sha: str  # PR head SHA, else same as sha
    issue_number: int | None = None


class DeploymentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str


class DeploymentInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_name: str
    inspector_url: str | None = None
    deployment_id: str | None = None


class StatusComment(BaseModel):
    """Rendered comment. `title` doubles as the key used to find it again."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str


class Comment(BaseModel):
    """An issue or commit comment as listed by the GitHub API."""

    model_config = ConfigDict(frozen=True)

    id: int
    body: str | None = None


class PublishOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: str  # "created" | "updated" | "skipped"
    comment_id: int | None = None
