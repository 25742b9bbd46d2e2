from enum import Enum
from pydantic import BaseModel


class SyncStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class SyncDetails(BaseModel):
    """What a sync run persisted and which source answered."""
    count: int | None = None
    source: str | None = None
    kind: str | None = None


class SyncResponse(BaseModel):
    status: SyncStatus
    message: str
    details: SyncDetails | None = None
