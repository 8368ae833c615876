import re
import httpx
from pydantic import BaseModel
from typing import List, Optional, Tuple
import logging

from cloud_tracker.clients.base import FetchResult, ProviderClient, parse_records
from cloud_tracker.config import settings

logger = logging.getLogger(__name__)

ACCOUNT_ID_PATTERN = r"^[a-f0-9]{32}$"
ACCOUNT_ID_RE = re.compile(ACCOUNT_ID_PATTERN)


def is_valid_account_id(account_id: Optional[str]) -> bool:
    return bool(account_id) and ACCOUNT_ID_RE.fullmatch(account_id) is not None


class CloudflareSourceConfig(BaseModel):
    repo_name: Optional[str] = None
    owner: Optional[str] = None


class CloudflareSource(BaseModel):
    type: Optional[str] = None
    config: Optional[CloudflareSourceConfig] = None


class CloudflarePagesProject(BaseModel):
    name: str
    subdomain: str = ""
    domains: List[str] = []
    source: Optional[CloudflareSource] = None

    @property
    def repo_name(self) -> Optional[str]:
        if self.source and self.source.config:
            return self.source.config.repo_name
        return None


class CloudflareStage(BaseModel):
    name: Optional[str] = None
    status: Optional[str] = None


class CloudflareTriggerMetadata(BaseModel):
    branch: Optional[str] = None
    commit_hash: Optional[str] = None


class CloudflareDeploymentTrigger(BaseModel):
    type: Optional[str] = None
    metadata: Optional[CloudflareTriggerMetadata] = None


class CloudflarePagesDeployment(BaseModel):
    id: str
    url: Optional[str] = None
    environment: Optional[str] = None
    created_on: str
    latest_stage: Optional[CloudflareStage] = None
    deployment_trigger: Optional[CloudflareDeploymentTrigger] = None

    @property
    def branch(self) -> Optional[str]:
        if self.deployment_trigger and self.deployment_trigger.metadata:
            return self.deployment_trigger.metadata.branch or None
        return None

    @property
    def commit_sha(self) -> Optional[str]:
        if self.deployment_trigger and self.deployment_trigger.metadata:
            return self.deployment_trigger.metadata.commit_hash or None
        return None


class CloudflareWorkerScript(BaseModel):
    id: str


class CloudflareClient(ProviderClient):
    provider = "cloudflare"

    def __init__(
        self,
        token: str,
        account_id: str,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(token, settings.cloudflare_api_base, transport=transport)
        self.account_id = account_id

    def _account_get(self, endpoint: str) -> FetchResult:
        """GET /accounts/{account_id}{endpoint}, refusing to send a request for a malformed account id."""
        if not is_valid_account_id(self.account_id):
            logger.error("Invalid Cloudflare account ID format")
            return FetchResult(error="invalid account id")
        result = self._get(f"/accounts/{self.account_id}{endpoint}")
        if not result.ok:
            return result
        # Cloudflare wraps everything in {success, errors, result}
        envelope = result.data if isinstance(result.data, dict) else {}
        return FetchResult(data=envelope.get("result"), status_code=result.status_code)

    def list_pages_projects(self) -> List[CloudflarePagesProject]:
        result = self._account_get("/pages/projects")
        if not result.ok:
            return []
        return parse_records(CloudflarePagesProject, result.data, "Cloudflare Pages project")

    def list_pages_deployments(self, project_name: str) -> List[CloudflarePagesDeployment]:
        result = self._account_get(f"/pages/projects/{project_name}/deployments")
        if not result.ok:
            return []
        return parse_records(CloudflarePagesDeployment, result.data, "Cloudflare Pages deployment")

    def list_worker_scripts(self) -> List[CloudflareWorkerScript]:
        result = self._account_get("/workers/scripts")
        if not result.ok:
            return []
        return parse_records(CloudflareWorkerScript, result.data, "Cloudflare Workers script")

    def test_connection(self) -> Tuple[bool, Optional[str]]:
        if not is_valid_account_id(self.account_id):
            return False, "Cloudflare account ID must be 32 lowercase hex characters"
        try:
            response = self.http.get(f"/accounts/{self.account_id}/pages/projects")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return False, str(e)
        if response.is_success:
            return True, None
        try:
            errors = response.json().get("errors") or []
            message = errors[0].get("message") if errors else None
        except (ValueError, AttributeError, LookupError, TypeError):
            message = None
        return False, message or "Failed to connect to Cloudflare"
