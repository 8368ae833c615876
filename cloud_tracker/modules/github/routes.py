from fastapi import APIRouter, Depends, Path
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.clients.factory import ProviderClientFactory, get_client_factory
from cloud_tracker.clients.github import GitHubRepo, GitHubTabData
from cloud_tracker.modules.github.schemas import StarredRepoList, GitHubImportRequest, GitHubImportResult
from cloud_tracker.modules.github.service import GitHubService
from cloud_tracker.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/github", tags=["github"])

_REPO_SEGMENT = r"^[A-Za-z0-9_.-]+$"


def get_github_service(
    supabase: Client = Depends(get_supabase),
    clients: ProviderClientFactory = Depends(get_client_factory)
) -> GitHubService:
    return GitHubService(supabase, clients)


@router.get("/repos", response_model=List[GitHubRepo])
def list_repos(
    current_user: Dict = Depends(get_current_user_id),
    service: GitHubService = Depends(get_github_service)
):
    return service.list_repos(current_user["id"])


@router.get("/starred", response_model=StarredRepoList)
def list_starred(
    current_user: Dict = Depends(get_current_user_id),
    service: GitHubService = Depends(get_github_service)
):
    return StarredRepoList(repos=service.list_starred(current_user["id"]))


@router.get("/repos/{owner}/{repo}/tab", response_model=GitHubTabData)
def get_tab_data(
    owner: str = Path(..., pattern=_REPO_SEGMENT),
    repo: str = Path(..., pattern=_REPO_SEGMENT),
    current_user: Dict = Depends(get_current_user_id),
    service: GitHubService = Depends(get_github_service)
):
    """Pull requests, issues, commits, workflow runs and releases for one repo"""
    return service.get_tab_data(owner, repo, current_user["id"])


@router.post("/import", response_model=GitHubImportResult)
def import_repos(
    request: Optional[GitHubImportRequest] = None,
    current_user: Dict = Depends(get_current_user_id),
    service: GitHubService = Depends(get_github_service)
):
    username = request.username if request else None
    return service.import_repos(username, current_user["id"])
