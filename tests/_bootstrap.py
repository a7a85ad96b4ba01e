"""Test helper that normalizes sys.path and environment defaults."""

from __future__ import annotations

import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


_DEFAULT_ENV_VARS: dict[str, str] = {
    "CARTHOOKS_API_URL": "https://api.carthooks.test",
}

# Credentials from a developer shell must not leak into the suite.
_SCRUBBED_ENV_VARS = (
    "CARTHOOKS_ACCESS_TOKEN",
    "CARTHOOKS_CLIENT_ID",
    "CARTHOOKS_CLIENT_SECRET",
    "CARTHOOKS_REFRESH_TOKEN",
    "CARTHOOKS_AUTO_REFRESH",
    "CARTHOOKS_SDK_DEBUG",
    "CARTHOOKS_HEADERS",
    "CARTHOOKS_TIMEOUT",
    "CARTHOOKS_SQS_QUEUE_URL",
)

for key in _SCRUBBED_ENV_VARS:
    os.environ.pop(key, None)

for key, value in _DEFAULT_ENV_VARS.items():
    os.environ.setdefault(key, value)
