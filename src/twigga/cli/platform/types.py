"""Data types for the local profile and Twigga service contracts."""

from pydantic import BaseModel, Field

from .config import DEFAULT_ACCOUNT_URL, DEFAULT_BASE_URL


class Profile(BaseModel):
    """Per-user profile stored in ~/.twigga/config.json."""

    status: bool = False
    base_url: str = Field(DEFAULT_BASE_URL, alias="baseURL")
    account_base_url: str = Field(DEFAULT_ACCOUNT_URL, alias="accountBaseURL")
    project_id: str = Field("", alias="projectId")
    token: str = ""

    model_config = {"populate_by_name": True}

    @classmethod
    def zero(cls) -> "Profile":
        """Profile with every field empty, used when the file is unreadable JSON."""
        return cls(base_url="", account_base_url="")

    @property
    def is_logged_in(self) -> bool:
        return self.status and bool(self.token)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


class UserRecord(BaseModel):
    """Account record returned by token introspection."""

    id: str
    email: str | None = None
    name: str | None = None


class ProjectRecord(BaseModel):
    """Document from the Twigga/Projects collection."""

    project_name: str = Field(alias="projectName")
    project_id: str = Field(alias="projectId")

    model_config = {"populate_by_name": True}


class BucketRecord(BaseModel):
    """Document from the Twigga/Buckets collection."""

    folder: str
    folder_id: str = Field("", alias="folderId")
    project_id: str = Field("", alias="projectId")
    created_at: str | None = Field(None, alias="createdAt")

    model_config = {"populate_by_name": True}


class DeployResult(BaseModel):
    """Outcome of a successful site deploy."""

    bucket: str
    site_id: str
    version: str
    files: list[str] = Field(default_factory=list)
    url: str
