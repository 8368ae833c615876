"""
Deployment reconciliation: converge the local deployments table with what a
provider reports for one linked application.

Each fetched record is keyed by "<provider>:<native id>" and is inserted if
unseen, updated if its mapped status changed, and otherwise left alone, so a
re-run against unchanged upstream state performs no writes. Records are
committed one at a time; a failure on one record is logged and the rest of
the batch continues.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from supabase import Client
from typing import Any, Dict, List, Optional
import logging

from cloud_tracker.clients.factory import ProviderClientFactory
from cloud_tracker.config import settings
from cloud_tracker.core.results import ActionResult
from cloud_tracker.modules.sync import sync_locks
from cloud_tracker.modules.sync.mappers import (
    classify_environment, map_cloudflare_stage, map_github_status, map_vercel_state
)
from cloud_tracker.modules.sync.schemas import SyncAllResult, SyncCounts
from cloud_tracker.modules.environments.service import EnvironmentService
from cloud_tracker.modules.user_settings.service import UserSettingsService

logger = logging.getLogger(__name__)


@dataclass
class SyncRecord:
    """A provider deployment already translated into local column values."""
    external_id: str
    environment_id: str
    status: str
    url: Optional[str]
    branch: Optional[str]
    commit_sha: Optional[str]
    deployed_at: Optional[str]


def _https(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    return url if url.startswith("http") else f"https://{url}"


class DeploymentSyncService:
    def __init__(self, supabase: Client, clients: Optional[ProviderClientFactory] = None):
        self.supabase = supabase
        self.clients = clients or ProviderClientFactory()
        self.user_settings = UserSettingsService(supabase)
        self.environments = EnvironmentService(supabase)

    # -- preconditions -------------------------------------------------

    def _get_owned_application(self, application_id: str, user_id: str, columns: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("applications")\
            .select(columns)\
            .eq("id", application_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _get_provider_id(self, user_id: str, slug: str) -> Optional[str]:
        result = self.supabase.table("cloud_providers")\
            .select("id")\
            .eq("user_id", user_id)\
            .eq("slug", slug)\
            .limit(1)\
            .execute()
        return result.data[0]["id"] if result.data else None

    def _load_context(self, application_id: str, user: Optional[dict], linkage_field: str,
                      slug: str, missing_link_error: str, missing_provider_error: str):
        """Run the shared precondition chain. Returns (error, app, provider_id, env_ids)."""
        if not user:
            return "Unauthorized", None, None, None
        app = self._get_owned_application(application_id, user["id"], f"id, user_id, {linkage_field}")
        if not app:
            return "Application not found", None, None, None
        if not app.get(linkage_field):
            return missing_link_error, None, None, None
        provider_id = self._get_provider_id(user["id"], slug)
        if not provider_id:
            return missing_provider_error, None, None, None
        return None, app, provider_id, self.environments.get_ids_by_slug()

    # -- reconciliation ------------------------------------------------

    def _reconcile(self, application_id: str, provider_id: str, records: List[SyncRecord]) -> SyncCounts:
        counts = SyncCounts(synced=len(records))
        for record in records:
            try:
                existing = self.supabase.table("deployments")\
                    .select("id, status")\
                    .eq("application_id", application_id)\
                    .eq("external_id", record.external_id)\
                    .limit(1)\
                    .execute()

                if existing.data:
                    row = existing.data[0]
                    if row["status"] != record.status:
                        self.supabase.table("deployments")\
                            .update({
                                "status": record.status,
                                "url": record.url,
                                "branch": record.branch,
                                "commit_sha": record.commit_sha,
                            })\
                            .eq("id", row["id"])\
                            .execute()
                        counts.updated += 1
                    continue

                self.supabase.table("deployments").insert({
                    "application_id": application_id,
                    "provider_id": provider_id,
                    "environment_id": record.environment_id,
                    "external_id": record.external_id,
                    "url": record.url,
                    "branch": record.branch,
                    "commit_sha": record.commit_sha,
                    "status": record.status,
                    "deployed_at": record.deployed_at,
                }).execute()
                counts.created += 1
            except Exception as e:
                logger.warning(f"Failed to sync deployment {record.external_id} for application {application_id}: {e}")
        return counts

    # -- providers -----------------------------------------------------

    def sync_vercel_deployments(self, application_id: str, user: Optional[dict]) -> ActionResult[SyncCounts]:
        error, app, provider_id, env_ids = self._load_context(
            application_id, user, "vercel_project_id", "vercel",
            "No Vercel project linked to this application",
            "Vercel provider not found. Please ensure you have a Vercel provider configured.",
        )
        if error:
            return ActionResult[SyncCounts].fail(error)
        if "production" not in env_ids or "staging" not in env_ids:
            return ActionResult[SyncCounts].fail("Required environments not found")

        client = self.clients.vercel(self.user_settings.get_settings_row(user["id"]))
        if client is None:
            return ActionResult[SyncCounts].ok(SyncCounts())

        with sync_locks.application_lock(application_id), client:
            deployments = client.list_deployments(app["vercel_project_id"])
            records = [
                SyncRecord(
                    external_id=f"vercel:{d.uid}",
                    environment_id=env_ids["production"] if d.target == "production" else env_ids["staging"],
                    status=map_vercel_state(d.state),
                    url=f"https://{d.url}" if d.url else None,
                    branch=d.branch,
                    commit_sha=d.commit_sha,
                    deployed_at=datetime.fromtimestamp(d.created_at / 1000, tz=timezone.utc).isoformat(),
                )
                for d in deployments
            ]
            counts = self._reconcile(application_id, provider_id, records)

        logger.info(f"Vercel sync for {application_id}: {counts.synced} fetched, {counts.created} created, {counts.updated} updated")
        return ActionResult[SyncCounts].ok(counts)

    def sync_cloudflare_deployments(self, application_id: str, user: Optional[dict]) -> ActionResult[SyncCounts]:
        error, app, provider_id, env_ids = self._load_context(
            application_id, user, "cloudflare_project_name", "cloudflare",
            "No Cloudflare project linked to this application",
            "Cloudflare provider not found. Please ensure you have a Cloudflare provider configured.",
        )
        if error:
            return ActionResult[SyncCounts].fail(error)
        if "production" not in env_ids or "staging" not in env_ids:
            return ActionResult[SyncCounts].fail("Required environments not found")

        client = self.clients.cloudflare(self.user_settings.get_settings_row(user["id"]))
        if client is None:
            return ActionResult[SyncCounts].ok(SyncCounts())

        with sync_locks.application_lock(application_id), client:
            deployments = client.list_pages_deployments(app["cloudflare_project_name"])
            records = [
                SyncRecord(
                    external_id=f"cloudflare:{d.id}",
                    environment_id=env_ids["production"] if d.environment == "production" else env_ids["staging"],
                    status=map_cloudflare_stage(d.latest_stage),
                    url=_https(d.url),
                    branch=d.branch,
                    commit_sha=d.commit_sha,
                    deployed_at=d.created_on,
                )
                for d in deployments
            ]
            counts = self._reconcile(application_id, provider_id, records)

        logger.info(f"Cloudflare sync for {application_id}: {counts.synced} fetched, {counts.created} created, {counts.updated} updated")
        return ActionResult[SyncCounts].ok(counts)

    def sync_github_deployments(self, application_id: str, user: Optional[dict]) -> ActionResult[SyncCounts]:
        error, app, provider_id, env_ids = self._load_context(
            application_id, user, "github_repo_name", "github",
            "No GitHub repo linked",
            "GitHub provider not found",
        )
        if error:
            return ActionResult[SyncCounts].fail(error)

        owner, _, repo = app["github_repo_name"].partition("/")
        if not owner or not repo or "/" in repo:
            return ActionResult[SyncCounts].fail("Invalid repo name format")

        client = self.clients.github_for(self.user_settings.get_settings_row(user["id"]))
        if client is None:
            return ActionResult[SyncCounts].ok(SyncCounts())

        with sync_locks.application_lock(application_id), client:
            pairs = client.list_deployments(owner, repo)
            records = []
            for pair in pairs:
                gd = pair.deployment
                latest = pair.latest_status
                env_slug = classify_environment(gd.environment)
                records.append(SyncRecord(
                    external_id=f"github:{gd.id}",
                    environment_id=env_ids.get(env_slug) or env_ids.get("development"),
                    status=map_github_status(latest.state if latest else None),
                    url=latest.environment_url if latest and latest.environment_url else None,
                    branch=gd.ref or None,
                    commit_sha=gd.sha or None,
                    deployed_at=gd.created_at,
                ))
            counts = self._reconcile(application_id, provider_id, records)

        logger.info(f"GitHub sync for {application_id}: {counts.synced} fetched, {counts.created} created, {counts.updated} updated")
        return ActionResult[SyncCounts].ok(counts)

    def sync_all_deployments(self, user: Optional[dict]) -> ActionResult[SyncAllResult]:
        """Sync every linked Vercel/Cloudflare application of the caller. One failing sync never stops the rest."""
        if not user:
            return ActionResult[SyncAllResult].fail("Unauthorized")

        apps = self.supabase.table("applications")\
            .select("id, vercel_project_id, cloudflare_project_name")\
            .eq("user_id", user["id"])\
            .execute()

        jobs = []
        for app in apps.data or []:
            if app.get("vercel_project_id"):
                jobs.append((self.sync_vercel_deployments, app["id"]))
            if app.get("cloudflare_project_name"):
                jobs.append((self.sync_cloudflare_deployments, app["id"]))

        total = SyncAllResult(applications=len(apps.data or []))
        if not jobs:
            return ActionResult[SyncAllResult].ok(total)

        def run(job):
            func, application_id = job
            try:
                return func(application_id, user)
            except Exception as e:
                logger.error(f"Sync failed for application {application_id}: {e}")
                return None

        with ThreadPoolExecutor(max_workers=settings.sync_max_workers) as pool:
            results = list(pool.map(run, jobs))

        for result in results:
            if result is None or not result.success:
                total.failed += 1
                continue
            total.synced += result.data.synced
            total.created += result.data.created
            total.updated += result.data.updated

        return ActionResult[SyncAllResult].ok(total)
