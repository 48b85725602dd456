from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Set

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

for path in (BASE_DIR, SRC_DIR):
    if str(path) not in sys.path:
        sys.path.append(str(path))


@pytest.fixture(autouse=True)
def _no_py_trace(monkeypatch: pytest.MonkeyPatch) -> None:
    """Error output must not depend on the developer's SALTY_DEBUG_PY_TRACE."""
    monkeypatch.delenv("SALTY_DEBUG_PY_TRACE", raising=False)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Fail fast if pytest ever generates duplicate node IDs."""
    del session
    del config

    seen: Set[str] = set()
    duplicates: Set[str] = set()

    for item in items:
        if item.nodeid in seen:
            duplicates.add(item.nodeid)
        seen.add(item.nodeid)

    if duplicates:
        lines = "\n".join(f"- {nodeid}" for nodeid in sorted(duplicates))
        raise pytest.UsageError(f"Duplicate pytest nodeids detected during collection:\n{lines}")
