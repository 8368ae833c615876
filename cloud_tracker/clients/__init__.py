from cloud_tracker.clients.base import FetchResult
from cloud_tracker.clients.factory import ProviderClientFactory
from cloud_tracker.clients.vercel import VercelClient
from cloud_tracker.clients.cloudflare import CloudflareClient, is_valid_account_id
from cloud_tracker.clients.github import GitHubClient

__all__ = [
    "FetchResult",
    "ProviderClientFactory",
    "VercelClient",
    "CloudflareClient",
    "GitHubClient",
    "is_valid_account_id",
]
