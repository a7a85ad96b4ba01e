"""Public schema exports."""

from .envelope import Envelope, EnvelopeError, parse_envelope
from .oauth import (
    GrantType,
    OAuthAuthorizeCodeRequest,
    OAuthAuthorizeCodeResponse,
    OAuthTokenRequest,
    OAuthTokens,
    User,
    UserInfo,
)
from .records import (
    App,
    Collection,
    Connection,
    ConnectionLog,
    ConnectionLogStatus,
    ConnectionStatus,
    ConnectionUsage,
    CreateConnectionLogRequest,
    CreateConnectionRequest,
    CreateConnectionUsageRequest,
    EventCode,
    EventMessage,
    EventMessageMeta,
    ImageResult,
    IssuedToken,
    LockOptions,
    PaginationMeta,
    PaginationOptions,
    QueryOptions,
    Record,
    SubmissionToken,
    SubmissionTokenOptions,
    UpdateConnectionRequest,
    UpdateToken,
    UpdateTokenOptions,
    UploadToken,
    UrlSets,
    WatchDataOptions,
    WatchDataResponse,
)
from .result import Result

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
    "Envelope",
    "EnvelopeError",
    "EventCode",
    "EventMessage",
    "EventMessageMeta",
    "GrantType",
    "ImageResult",
    "IssuedToken",
    "LockOptions",
    "OAuthAuthorizeCodeRequest",
    "OAuthAuthorizeCodeResponse",
    "OAuthTokenRequest",
    "OAuthTokens",
    "PaginationMeta",
    "PaginationOptions",
    "QueryOptions",
    "Record",
    "Result",
    "SubmissionToken",
    "SubmissionTokenOptions",
    "UpdateConnectionRequest",
    "UpdateToken",
    "UpdateTokenOptions",
    "UploadToken",
    "UrlSets",
    "User",
    "UserInfo",
    "WatchDataOptions",
    "WatchDataResponse",
    "parse_envelope",
]
