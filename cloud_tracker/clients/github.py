import httpx
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
import logging

from cloud_tracker.clients.base import ProviderClient, parse_records
from cloud_tracker.config import settings

logger = logging.getLogger(__name__)


class GitHubUser(BaseModel):
    login: str
    avatar_url: Optional[str] = None


class GitHubLabel(BaseModel):
    name: str
    color: Optional[str] = None


class GitHubRepo(BaseModel):
    id: int
    name: str
    full_name: str
    description: Optional[str] = None
    html_url: str
    private: bool = False
    pushed_at: Optional[str] = None
    language: Optional[str] = None
    topics: List[str] = []
    stargazers_count: int = 0
    forks_count: int = 0


class GitHubDeployment(BaseModel):
    id: int
    ref: Optional[str] = None
    sha: Optional[str] = None
    environment: str = ""
    created_at: str


class GitHubDeploymentStatus(BaseModel):
    id: int
    state: Optional[str] = None
    environment_url: Optional[str] = None
    created_at: Optional[str] = None


class GitHubDeploymentWithStatus(BaseModel):
    deployment: GitHubDeployment
    latest_status: Optional[GitHubDeploymentStatus] = None


class GitHubPullRequest(BaseModel):
    id: int
    number: int
    title: str
    state: str
    draft: bool = False
    html_url: str
    user: Optional[GitHubUser] = None
    labels: List[GitHubLabel] = []
    created_at: str
    updated_at: str
    merged_at: Optional[str] = None
    comments: int = 0


class GitHubIssue(BaseModel):
    id: int
    number: int
    title: str
    state: str
    html_url: str
    user: Optional[GitHubUser] = None
    labels: List[GitHubLabel] = []
    assignees: List[GitHubUser] = []
    comments: int = 0
    created_at: str
    updated_at: str
    pull_request: Optional[Dict[str, Any]] = None


class GitHubCommitAuthor(BaseModel):
    name: Optional[str] = None
    date: Optional[str] = None


class GitHubCommitDetail(BaseModel):
    message: str
    author: Optional[GitHubCommitAuthor] = None


class GitHubCommit(BaseModel):
    sha: str
    html_url: str
    commit: GitHubCommitDetail
    author: Optional[GitHubUser] = None


class GitHubWorkflowRun(BaseModel):
    id: int
    name: Optional[str] = None
    head_branch: Optional[str] = None
    run_number: int
    event: str
    status: Optional[str] = None
    conclusion: Optional[str] = None
    html_url: str
    created_at: str
    updated_at: str


class GitHubRelease(BaseModel):
    id: int
    tag_name: str
    name: Optional[str] = None
    body: Optional[str] = None
    draft: bool = False
    prerelease: bool = False
    html_url: str
    published_at: Optional[str] = None
    created_at: str
    author: Optional[GitHubUser] = None


class GitHubTabData(BaseModel):
    pull_requests: List[GitHubPullRequest] = []
    issues: List[GitHubIssue] = []
    commits: List[GitHubCommit] = []
    workflow_runs: List[GitHubWorkflowRun] = []
    releases: List[GitHubRelease] = []
    fetched_at: datetime


class GitHubClient(ProviderClient):
    provider = "github"

    def __init__(
        self,
        token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        max_workers: Optional[int] = None,
    ):
        super().__init__(token, settings.github_api_base, transport=transport)
        self.max_workers = max_workers or settings.sync_max_workers

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "cloud-tracker",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_authenticated_login(self) -> Optional[str]:
        result = self._get("/user")
        if not result.ok or not isinstance(result.data, dict):
            return None
        return result.data.get("login")

    def list_user_repos(self) -> List[GitHubRepo]:
        result = self._get("/user/repos", params={"sort": "updated", "per_page": 100, "type": "owner"})
        if not result.ok:
            return []
        return parse_records(GitHubRepo, result.data, "GitHub repo")

    def list_public_repos(self, username: str) -> Optional[List[GitHubRepo]]:
        """Public repos for a username. None (not []) when GitHub could not be reached."""
        result = self._get(f"/users/{username}/repos", params={"per_page": 100, "sort": "pushed"})
        if not result.ok:
            return None
        return parse_records(GitHubRepo, result.data, "GitHub repo")

    def list_starred(self, username: str) -> List[GitHubRepo]:
        result = self._get(f"/users/{username}/starred", params={"per_page": 100})
        if not result.ok:
            return []
        return parse_records(GitHubRepo, result.data, "GitHub starred repo")

    def _latest_status(self, owner: str, repo: str, deployment: GitHubDeployment) -> GitHubDeploymentWithStatus:
        result = self._get(
            f"/repos/{owner}/{repo}/deployments/{deployment.id}/statuses",
            params={"per_page": 1},
        )
        statuses = parse_records(GitHubDeploymentStatus, result.data, "GitHub deployment status") if result.ok else []
        return GitHubDeploymentWithStatus(
            deployment=deployment,
            latest_status=statuses[0] if statuses else None,
        )

    def list_deployments(self, owner: str, repo: str) -> List[GitHubDeploymentWithStatus]:
        """Deployments for owner/repo, each paired with its most recent status (fetched concurrently)."""
        result = self._get(f"/repos/{owner}/{repo}/deployments", params={"per_page": 30})
        if not result.ok:
            return []
        deployments = parse_records(GitHubDeployment, result.data, "GitHub deployment")
        if not deployments:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(lambda d: self._latest_status(owner, repo, d), deployments))

    def get_tab_data(self, owner: str, repo: str) -> GitHubTabData:
        """PRs, issues, commits, workflow runs and releases. Each section degrades to [] on its own."""
        base = f"/repos/{owner}/{repo}"
        sections = {
            "pulls": (f"{base}/pulls", {"state": "all", "per_page": 10, "sort": "updated"}),
            "issues": (f"{base}/issues", {"state": "all", "per_page": 10, "sort": "updated"}),
            "commits": (f"{base}/commits", {"per_page": 20}),
            "runs": (f"{base}/actions/runs", {"per_page": 10}),
            "releases": (f"{base}/releases", {"per_page": 5}),
        }
        with ThreadPoolExecutor(max_workers=len(sections)) as pool:
            futures = {key: pool.submit(self._get, path, params) for key, (path, params) in sections.items()}
            results = {key: future.result() for key, future in futures.items()}

        def section(key: str) -> Any:
            return results[key].data if results[key].ok else []

        runs_payload = section("runs")
        issues = [i for i in parse_records(GitHubIssue, section("issues"), "GitHub issue") if not i.pull_request]
        return GitHubTabData(
            pull_requests=parse_records(GitHubPullRequest, section("pulls"), "GitHub pull request"),
            issues=issues,
            commits=parse_records(GitHubCommit, section("commits"), "GitHub commit"),
            workflow_runs=parse_records(
                GitHubWorkflowRun,
                runs_payload.get("workflow_runs") if isinstance(runs_payload, dict) else [],
                "GitHub workflow run",
            ),
            releases=parse_records(GitHubRelease, section("releases"), "GitHub release"),
            fetched_at=datetime.now(timezone.utc),
        )
