import httpx
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Tuple
import logging

from cloud_tracker.clients.base import ProviderClient, parse_records
from cloud_tracker.config import settings

logger = logging.getLogger(__name__)


class VercelProjectLink(BaseModel):
    type: Optional[str] = None
    repo: Optional[str] = None


class VercelProductionTarget(BaseModel):
    alias: List[str] = []


class VercelProjectTargets(BaseModel):
    production: Optional[VercelProductionTarget] = None


class VercelProject(BaseModel):
    id: str
    name: str
    framework: Optional[str] = None
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")
    link: Optional[VercelProjectLink] = None
    targets: Optional[VercelProjectTargets] = None

    class Config:
        populate_by_name = True

    @property
    def production_aliases(self) -> List[str]:
        if self.targets and self.targets.production:
            return self.targets.production.alias
        return []


class VercelDeployment(BaseModel):
    uid: str
    name: str = ""
    url: Optional[str] = None
    state: str = "QUEUED"
    target: Optional[str] = None
    created_at: int = Field(alias="createdAt")
    meta: Dict[str, Any] = {}

    class Config:
        populate_by_name = True

    @property
    def branch(self) -> Optional[str]:
        return self.meta.get("githubCommitRef") or None

    @property
    def commit_sha(self) -> Optional[str]:
        return self.meta.get("githubCommitSha") or None


def _unwrap(payload: Any, key: str) -> Any:
    """Vercel lists come wrapped as {key: [...]}; anything else that is not a list is unusable."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return payload.get(key, [])
    logger.warning(f"Unexpected Vercel {key} payload: {type(payload).__name__}")
    return []


class VercelClient(ProviderClient):
    provider = "vercel"

    def __init__(
        self,
        token: str,
        team_id: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(token, settings.vercel_api_base, transport=transport)
        self.team_id = team_id or None

    def _params(self, **params) -> Dict[str, Any]:
        if self.team_id:
            params["teamId"] = self.team_id
        return params

    def list_projects(self) -> List[VercelProject]:
        result = self._get("/v9/projects", params=self._params(limit=100))
        if not result.ok:
            return []
        projects = _unwrap(result.data, "projects")
        return parse_records(VercelProject, projects, "Vercel project")

    def list_deployments(self, project_id: str) -> List[VercelDeployment]:
        result = self._get("/v6/deployments", params=self._params(projectId=project_id, limit=50))
        if not result.ok:
            return []
        raw = _unwrap(result.data, "deployments")
        if isinstance(raw, list):
            # Deployments that have not been created yet carry no timestamp
            raw = [d for d in raw if isinstance(d, dict) and d.get("createdAt") is not None]
            for d in raw:
                if not d.get("state"):
                    d["state"] = "QUEUED"
        return parse_records(VercelDeployment, raw, "Vercel deployment")

    def test_connection(self) -> Tuple[bool, Optional[str]]:
        result = self._get("/v2/user")
        if result.ok:
            return True, None
        return False, f"Failed to connect to Vercel ({result.error})"
