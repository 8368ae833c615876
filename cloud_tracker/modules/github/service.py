"""
GitHub views for the dashboard and the bulk import of a user's public repos.

Import creates one application per public repository that is not already
tracked (matched on repository_url). The tech stack is inferred from the
repo's language, name, description and topics, and each entry becomes a tag.
"""

from supabase import Client
from cloud_tracker.clients.factory import ProviderClientFactory
from cloud_tracker.clients.github import GitHubRepo, GitHubTabData
from cloud_tracker.modules.github.schemas import StarredRepo, GitHubImportResult
from cloud_tracker.modules.tags.service import TagService
from cloud_tracker.modules.user_settings.service import UserSettingsService
from typing import Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

DEFAULT_TAG_COLOR = "#6b7280"

TAG_COLORS = {
    "TypeScript": "#3178c6",
    "JavaScript": "#f7df1e",
    "Next.js": "#000000",
    "React": "#61dafb",
    "Astro": "#ff5d01",
    "Swift": "#fa7343",
    "Cloudflare": "#f38020",
    "Supabase": "#3ecf8e",
    "MDX": "#fcb32c",
    "Shell": "#89e051",
    "macOS": "#000000",
}


def infer_tech_stack(repo: GitHubRepo) -> List[str]:
    stack: List[str] = []
    if repo.language:
        stack.append(repo.language)

    combined = f"{repo.name} {repo.description or ''} {' '.join(repo.topics)}".lower()

    if "next" in combined:
        stack.append("Next.js")
    if "astro" in combined:
        stack.append("Astro")
    if "react" in combined and "Next.js" not in stack:
        stack.append("React")
    if "cloudflare" in combined or "worker" in combined:
        stack.append("Cloudflare")
    if "supabase" in combined:
        stack.append("Supabase")
    if "swift" in combined or repo.language == "Swift":
        stack.append("macOS")

    return list(dict.fromkeys(stack))


class GitHubService:
    def __init__(self, supabase: Client, clients: Optional[ProviderClientFactory] = None):
        self.supabase = supabase
        self.clients = clients or ProviderClientFactory()
        self.user_settings = UserSettingsService(supabase)
        self.tags = TagService(supabase)

    def list_repos(self, user_id: str) -> List[GitHubRepo]:
        """Repos owned by the stored token's account; [] without a token"""
        client = self.clients.github_for(self.user_settings.get_settings_row(user_id))
        if client is None:
            return []
        with client:
            return client.list_user_repos()

    def list_starred(self, user_id: str) -> List[StarredRepo]:
        row = self.user_settings.get_settings_row(user_id) or {}
        if not row.get("github_token") or not row.get("github_username"):
            raise HTTPException(status_code=400, detail="GitHub token not configured")
        with self.clients.github(row["github_token"]) as client:
            repos = client.list_starred(row["github_username"])
        return [StarredRepo(**repo.model_dump()) for repo in repos]

    def get_tab_data(self, owner: str, repo: str, user_id: str) -> GitHubTabData:
        client = self.clients.github_for(self.user_settings.get_settings_row(user_id))
        if client is None:
            raise HTTPException(status_code=400, detail="No GitHub token configured")
        with client:
            return client.get_tab_data(owner, repo)

    def _tag_application(self, application_id: str, tech_stack: List[str], user_id: str, cache: Dict[str, str]) -> None:
        for tech in tech_stack:
            try:
                if tech not in cache:
                    cache[tech] = self.tags.get_or_create_tag(tech, TAG_COLORS.get(tech, DEFAULT_TAG_COLOR), user_id)
                self.supabase.table("application_tags").insert({
                    "application_id": application_id,
                    "tag_id": cache[tech],
                }).execute()
            except Exception as e:
                logger.warning(f"Could not tag application {application_id} with {tech}: {e}")

    def import_repos(self, username: Optional[str], user_id: str) -> GitHubImportResult:
        row = self.user_settings.get_settings_row(user_id) or {}
        username = username or row.get("github_username")
        if not username:
            raise HTTPException(status_code=400, detail="GitHub username required")

        with self.clients.github(row.get("github_token")) as client:
            repos = client.list_public_repos(username)
        if repos is None:
            raise HTTPException(status_code=500, detail="Failed to fetch GitHub repos")

        existing = self.supabase.table("applications")\
            .select("repository_url")\
            .eq("user_id", user_id)\
            .execute()
        existing_urls = {a["repository_url"] for a in existing.data or [] if a.get("repository_url")}

        result = GitHubImportResult()
        tag_cache: Dict[str, str] = {}

        for repo in repos:
            if repo.html_url in existing_urls:
                result.skipped.append(f"{repo.name} (already exists)")
                continue
            if repo.private:
                result.skipped.append(f"{repo.name} (private)")
                continue

            try:
                tech_stack = infer_tech_stack(repo)
                created = self.supabase.table("applications").insert({
                    "user_id": user_id,
                    "name": repo.name,
                    "description": repo.description,
                    "repository_url": repo.html_url,
                    "tech_stack": tech_stack,
                    "status": "active",
                }).execute()
                if not created.data:
                    raise RuntimeError("insert returned no row")

                self._tag_application(created.data[0]["id"], tech_stack, user_id, tag_cache)
                existing_urls.add(repo.html_url)
                result.imported.append(repo.name)
            except Exception as e:
                logger.error(f"Failed to import repo {repo.full_name}: {e}")
                result.errors.append(f"{repo.name}: {e}")

        logger.info(
            f"GitHub import for user {user_id} from {username}: "
            f"{len(result.imported)} imported, {len(result.skipped)} skipped, {len(result.errors)} errors"
        )
        return result
