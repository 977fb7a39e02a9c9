"""GitHub REST API resource models."""

from pydantic import BaseModel, ConfigDict, Field


class Account(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: str
    id: int | None = None


class Installation(BaseModel):
    """An installation of the app on an organization."""

    model_config = ConfigDict(extra="ignore")

    id: int
    app_id: int | None = None
    account: Account | None = None
    events: list[str] = Field(default_factory=list)


class Branch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ref: str
    sha: str | None = None


class PullRequest(BaseModel):
    """The fields of a pull request this service reads."""

    model_config = ConfigDict(extra="ignore")

    number: int
    url: str = ""
    html_url: str = ""
    title: str | None = None
    body: str | None = None
    state: str | None = None
    head: Branch | None = None
    base: Branch | None = None
    maintainer_can_modify: bool | None = None


class NewPullRequest(BaseModel):
    """Request body for creating a pull request."""

    title: str
    head: str
    base: str
    body: str | None = None
    maintainer_can_modify: bool = True
    draft: bool = False


class PullRequestEdit(BaseModel):
    """Request body for editing a pull request; unset fields are left unchanged."""

    title: str | None = None
    body: str | None = None
    state: str | None = None
    base: str | None = None
    maintainer_can_modify: bool | None = None
