"""
Auto-connect: link applications to provider projects by repository name.

The repo name is the last path segment of an application's repository_url.
Vercel projects are matched by the tail of their git link (then by project
name), Cloudflare Pages projects by their source repo_name (then by project
name) and Workers scripts by script id. Linkage fields and live_url are only
ever filled in when empty; nothing already set is overwritten.
"""

from concurrent.futures import ThreadPoolExecutor
from supabase import Client
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse
import logging

from cloud_tracker.clients.cloudflare import CloudflarePagesProject, CloudflareWorkerScript
from cloud_tracker.clients.factory import ProviderClientFactory
from cloud_tracker.clients.vercel import VercelProject
from cloud_tracker.config import settings
from cloud_tracker.core.results import ActionResult
from cloud_tracker.modules.auto_connect.schemas import AutoConnectResult, ProviderMatch
from cloud_tracker.modules.user_settings.service import UserSettingsService

logger = logging.getLogger(__name__)

Lookup = Dict[str, ProviderMatch]

APPLICATION_COLUMNS = (
    "id, name, repository_url, vercel_project_id, cloudflare_project_name, "
    "cloudflare_worker_name, github_repo_name, live_url"
)


def _path_segments(url: Optional[str]) -> Optional[List[str]]:
    if not url:
        return None
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return [segment for segment in parsed.path.split("/") if segment]


def extract_repo_name(url: Optional[str]) -> Optional[str]:
    """'https://github.com/acme/widget' -> 'widget'. Needs at least owner and repo segments."""
    segments = _path_segments(url)
    if not segments or len(segments) < 2:
        return None
    return segments[-1]


def extract_owner_repo(url: Optional[str]) -> Optional[str]:
    """'https://github.com/acme/widget/tree/main' -> 'acme/widget'."""
    segments = _path_segments(url)
    if not segments or len(segments) < 2:
        return None
    return f"{segments[0]}/{segments[1]}"


def build_vercel_lookup(projects: List[VercelProject]) -> Lookup:
    lookup: Lookup = {}
    for project in projects:
        aliases = project.production_aliases
        custom = next((a for a in aliases if not a.endswith(".vercel.app")), None)
        if custom:
            live_url = f"https://{custom}"
        elif aliases:
            live_url = f"https://{aliases[0]}"
        else:
            live_url = ""

        match = ProviderMatch(value=project.id, live_url=live_url)
        if project.link and project.link.repo:
            lookup[project.link.repo.split("/")[-1] or project.link.repo] = match
        if project.name not in lookup:
            lookup[project.name] = match
    return lookup


def build_cloudflare_lookup(projects: List[CloudflarePagesProject]) -> Lookup:
    lookup: Lookup = {}
    for project in projects:
        if project.domains:
            live_url = f"https://{project.domains[0]}"
        else:
            live_url = f"https://{project.subdomain}"

        match = ProviderMatch(value=project.name, live_url=live_url)
        if project.repo_name:
            lookup[project.repo_name] = match
        if project.name not in lookup:
            lookup[project.name] = match
    return lookup


def build_worker_lookup(scripts: List[CloudflareWorkerScript]) -> Lookup:
    return {script.id: ProviderMatch(value=script.id) for script in scripts}


class AutoConnectService:
    def __init__(self, supabase: Client, clients: Optional[ProviderClientFactory] = None):
        self.supabase = supabase
        self.clients = clients or ProviderClientFactory()
        self.user_settings = UserSettingsService(supabase)

    def _vercel_lookup(self, user_settings: Dict[str, Any]) -> Lookup:
        client = self.clients.vercel(user_settings)
        if client is None:
            return {}
        with client:
            return build_vercel_lookup(client.list_projects())

    def _cloudflare_lookup(self, user_settings: Dict[str, Any]) -> Lookup:
        client = self.clients.cloudflare(user_settings)
        if client is None:
            return {}
        with client:
            return build_cloudflare_lookup(client.list_pages_projects())

    def _worker_lookup(self, user_settings: Dict[str, Any]) -> Lookup:
        client = self.clients.cloudflare(user_settings)
        if client is None:
            return {}
        with client:
            return build_worker_lookup(client.list_worker_scripts())

    def _build_lookups(self, user_settings: Optional[Dict[str, Any]]) -> Tuple[Lookup, Lookup, Lookup]:
        user_settings = user_settings or {}
        builders = (self._vercel_lookup, self._cloudflare_lookup, self._worker_lookup)

        def run(builder):
            try:
                return builder(user_settings)
            except Exception as e:
                logger.error(f"Failed to build provider lookup ({builder.__name__}): {e}")
                return {}

        with ThreadPoolExecutor(max_workers=len(builders)) as pool:
            vercel, cloudflare, workers = pool.map(run, builders)
        return vercel, cloudflare, workers

    def _apply_update(self, application_id: str, updates: Dict[str, str]) -> bool:
        try:
            self.supabase.table("applications")\
                .update(updates)\
                .eq("id", application_id)\
                .execute()
            return True
        except Exception as e:
            logger.warning(f"Auto-connect update failed for application {application_id}: {e}")
            return False

    def auto_connect_providers(self, user: Optional[dict]) -> ActionResult[AutoConnectResult]:
        if not user:
            return ActionResult[AutoConnectResult].fail("Not authenticated")

        user_settings = self.user_settings.get_settings_row(user["id"])

        apps = self.supabase.table("applications")\
            .select(APPLICATION_COLUMNS)\
            .eq("user_id", user["id"])\
            .execute()
        if not apps.data:
            return ActionResult[AutoConnectResult].fail("No applications found")

        vercel_map, cloudflare_map, worker_map = self._build_lookups(user_settings)

        result = AutoConnectResult()
        pending: List[Tuple[str, Dict[str, str]]] = []

        for app in apps.data:
            repo_name = extract_repo_name(app.get("repository_url"))
            if not repo_name:
                result.no_repo_url += 1
                continue

            updates: Dict[str, str] = {}

            vercel_match = vercel_map.get(repo_name)
            if vercel_match and not app.get("vercel_project_id"):
                updates["vercel_project_id"] = vercel_match.value
                if not app.get("live_url") and vercel_match.live_url:
                    updates["live_url"] = vercel_match.live_url
                result.vercel.append(app["name"])

            cloudflare_match = cloudflare_map.get(repo_name)
            if cloudflare_match and not app.get("cloudflare_project_name"):
                updates["cloudflare_project_name"] = cloudflare_match.value
                if not app.get("live_url") and "live_url" not in updates and cloudflare_match.live_url:
                    updates["live_url"] = cloudflare_match.live_url
                result.cloudflare.append(app["name"])

            worker_match = worker_map.get(repo_name)
            if worker_match and not app.get("cloudflare_worker_name"):
                updates["cloudflare_worker_name"] = worker_match.value
                result.workers.append(app["name"])

            if not app.get("github_repo_name") and "github.com" in app["repository_url"]:
                owner_repo = extract_owner_repo(app["repository_url"])
                if owner_repo:
                    updates["github_repo_name"] = owner_repo
                    result.github.append(app["name"])

            if updates:
                pending.append((app["id"], updates))
            elif app.get("vercel_project_id") or app.get("cloudflare_project_name"):
                result.already_connected += 1

        if pending:
            with ThreadPoolExecutor(max_workers=settings.sync_max_workers) as pool:
                applied = list(pool.map(lambda item: self._apply_update(*item), pending))
            logger.info(f"Auto-connect for user {user['id']}: {sum(applied)}/{len(pending)} applications updated")

        return ActionResult[AutoConnectResult].ok(result)
