from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _no_signing_key_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a SIGNING_KEY from the developer's shell out of the tests."""
    monkeypatch.delenv("SIGNING_KEY", raising=False)
