"""
Pydantic schemas for resource payloads (records, collections, connections).

Request models are dumped with ``by_alias=True, exclude_none=True`` so unset
options never reach the wire.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Record(BaseModel):
    """A collection item: fixed metadata plus user-defined fields."""

    id: int
    title: str = ""
    created_at: int = 0
    updated_at: int = 0
    creator: int = 0
    fields: Dict[str, Any] = Field(default_factory=dict)


class PaginationMeta(_WireModel):
    page: int = 0
    page_size: int = Field(0, alias="pageSize")
    total: int = 0
    total_pages: int = Field(0, alias="totalPages")


class PaginationOptions(_WireModel):
    page: Optional[int] = None
    page_size: Optional[int] = Field(None, alias="pageSize")
    with_count: Optional[bool] = Field(None, alias="withCount")


class QueryOptions(_WireModel):
    pagination: Optional[PaginationOptions] = None
    filters: Optional[Dict[str, Any]] = None
    sort: Optional[List[str]] = None
    fields: Optional[List[str]] = None


class LockOptions(_WireModel):
    lock_timeout: Optional[int] = Field(None, alias="lockTimeout")
    lock_id: Optional[str] = Field(None, alias="lockId")
    subject: Optional[str] = Field(None, alias="lockSubject")

    def to_body(self) -> Dict[str, Any]:
        # Zero timeouts and empty strings mean "not set".
        return {key: value for key, value in super().to_body().items() if value}


class Collection(BaseModel):
    id: int
    name: str = ""
    description: Optional[str] = None


class App(BaseModel):
    id: int
    name: str = ""
    description: Optional[str] = None


class UrlSets(BaseModel):
    full_size_url: str = ""  # original size
    thumb_url: str = ""  # 128x128px
    icon_url: str = ""  # 26x26px


class ImageResult(BaseModel):
    url: Optional[UrlSets] = None
    meta: Any = None
    expired: int = 0
    file_size: int = 0
    created: int = 0


class SubmissionTokenOptions(_WireModel):
    callback_url: Optional[str] = None
    redirect_url: Optional[str] = None
    ttl: Optional[int] = None
    fields: Optional[List[str]] = None


class UpdateTokenOptions(_WireModel):
    ttl: Optional[int] = None
    fields: Optional[List[str]] = None


class IssuedToken(BaseModel):
    """Short-lived token issued for submissions, updates or uploads."""

    token: str
    url: str = ""
    expires_at: str = ""


SubmissionToken = IssuedToken
UpdateToken = IssuedToken
UploadToken = IssuedToken


class ConnectionStatus(IntEnum):
    PENDING = 0
    ACTIVE = 1
    INACTIVE = 2


class ConnectionLogStatus(IntEnum):
    CREATED = 1
    UPDATED = 2
    WARN = 3
    ERROR = 4


class Connection(BaseModel):
    id: int
    tenant_id: int = 0
    app_id: int = 0
    hooklet_id: int = 0
    dev_client_id: int = 0
    title: str = ""
    status: int = ConnectionStatus.PENDING
    icon_url: str = ""
    description: str = ""
    created_at: str = ""
    updated_at: str = ""


class ConnectionLog(BaseModel):
    id: int
    tenant_id: int = 0
    connection_id: int = 0
    status: int = ConnectionLogStatus.CREATED
    message: str = ""
    created_at: str = ""


class ConnectionUsage(BaseModel):
    id: int
    tenant_id: int = 0
    connection_id: int = 0
    usage: int = 0
    created_at: str = ""


class CreateConnectionRequest(_WireModel):
    hooklet_id: str
    title: str
    vendor_task_id: str
    icon_url: Optional[str] = None
    description: Optional[str] = None


class UpdateConnectionRequest(_WireModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = Field(None, description='"active" or "inactive".')
    icon_url: Optional[str] = None


class CreateConnectionLogRequest(_WireModel):
    status: ConnectionLogStatus
    message: str


class CreateConnectionUsageRequest(_WireModel):
    usage: int


class WatchDataOptions(_WireModel):
    endpoint_url: str
    endpoint_type: str
    name: str
    app_id: int
    collection_id: int
    filters: Optional[Dict[str, Any]] = None
    age: Optional[int] = None
    watch_start_time: Optional[int] = None


class WatchDataResponse(BaseModel):
    watch_id: str
    status: str = ""


class EventCode(str, Enum):
    RECORD_CREATED = "collection.item.created"
    RECORD_UPDATED = "collection.item.updated"


class EventMessageMeta(BaseModel):
    tenant_id: int = 0
    collection_id: int = 0
    event: Optional[str] = None
    trigger_type: str = ""
    trigger_name: Optional[str] = None

    def to_map(self) -> Dict[str, str]:
        return {
            "tenant_id": str(self.tenant_id),
            "collection_id": str(self.collection_id),
            "trigger_type": self.trigger_type,
            "trigger_name": self.trigger_name or "",
        }


class EventMessage(BaseModel):
    """Change notification delivered through the watch queue."""

    version: str = ""
    meta: EventMessageMeta = Field(default_factory=EventMessageMeta)
    payload: Optional[Dict[str, Any]] = None


__all__ = [
    "App",
    "Collection",
    "Connection",
    "ConnectionLog",
    "ConnectionLogStatus",
    "ConnectionStatus",
    "ConnectionUsage",
    "CreateConnectionLogRequest",
    "CreateConnectionRequest",
    "CreateConnectionUsageRequest",
    "EventCode",
    "EventMessage",
    "EventMessageMeta",
    "ImageResult",
    "IssuedToken",
    "LockOptions",
    "PaginationMeta",
    "PaginationOptions",
    "QueryOptions",
    "Record",
    "SubmissionToken",
    "SubmissionTokenOptions",
    "UpdateConnectionRequest",
    "UpdateToken",
    "UpdateTokenOptions",
    "UploadToken",
    "UrlSets",
    "WatchDataOptions",
    "WatchDataResponse",
]
