from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Import the local src tree, not an installed copy of orch-cli.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

_ORCH_ENV = ("ORCH_PROJECT", "ORCH_API_ENDPOINT", "MT_GW_TOKEN")


@pytest.fixture(autouse=True)
def _clean_orch_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's orch-cli environment out of the tests."""
    for name in _ORCH_ENV:
        monkeypatch.delenv(name, raising=False)
