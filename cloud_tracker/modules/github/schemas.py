from pydantic import BaseModel, Field
from typing import List, Optional

GITHUB_USERNAME_PATTERN = r"^[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,37}[a-zA-Z0-9])?$"


class StarredRepo(BaseModel):
    full_name: str
    description: Optional[str] = None
    html_url: str
    stargazers_count: int = 0
    forks_count: int = 0
    language: Optional[str] = None


class StarredRepoList(BaseModel):
    repos: List[StarredRepo]


class GitHubImportRequest(BaseModel):
    """Username whose public repos are imported. Defaults to the username in settings."""
    username: Optional[str] = Field(None, pattern=GITHUB_USERNAME_PATTERN)


class GitHubImportResult(BaseModel):
    imported: List[str] = []
    skipped: List[str] = []
    errors: List[str] = []
