# === NAVMAP v1 ===
# {
#   "module": "tests.conftest",
#   "purpose": "Shared pytest fixtures for suite",
#   "sections": [
#     {
#       "id": "isolate-settings",
#       "name": "isolate_settings",
#       "anchor": "function-isolate-settings",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Pytest Configuration

Makes ``src`` importable, exposes the HTTP mocking fixtures, and keeps the
cached settings and ``NETTOOLKIT_*`` environment from leaking between tests.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from tests.fixtures.http_mocking import (  # noqa: E402,F401
    http_mock,
    mocked_http_client,
    recording_sink,
    router,
)

from NetToolKit.settings import reset_settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch: pytest.MonkeyPatch):
    """Clear NETTOOLKIT_* variables and the settings cache around each test."""
    for key in list(os.environ):
        if key.upper().startswith("NETTOOLKIT_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()
