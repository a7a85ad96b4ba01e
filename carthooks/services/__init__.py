"""Service layer exports."""

from .credentials import CredentialStore
from .token_lifecycle import TokenFreshness, TokenLifecycleManager
from .watcher import Watcher, WatcherConfig

__all__ = [
    "CredentialStore",
    "TokenFreshness",
    "TokenLifecycleManager",
    "Watcher",
    "WatcherConfig",
]
