from pydantic import BaseModel


class SyncCounts(BaseModel):
    synced: int = 0
    created: int = 0
    updated: int = 0


class SyncAllResult(BaseModel):
    synced: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    applications: int = 0
