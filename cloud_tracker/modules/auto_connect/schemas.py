from pydantic import BaseModel
from typing import List


class ProviderMatch(BaseModel):
    """Lookup entry: what linking an application to this provider project would set."""
    value: str
    live_url: str = ""


class AutoConnectResult(BaseModel):
    vercel: List[str] = []
    cloudflare: List[str] = []
    workers: List[str] = []
    github: List[str] = []
    already_connected: int = 0
    no_repo_url: int = 0
