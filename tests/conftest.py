# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from kapa_alerts.core.state import AppState
from kapa_alerts.kapacitor.orchestrator import KapacitorOrchestrator

from .fakes import FakeEngine, FakeReverser, FakeTranslator, SequenceIDs


@pytest.fixture()
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture()
def orchestrator(engine: FakeEngine) -> KapacitorOrchestrator:
    """
    Orchestrator wired with deterministic fakes.

    Ids come out as chronograf-v1-t1, chronograf-v1-t2, ...
    """
    return KapacitorOrchestrator(
        engine,
        translator=FakeTranslator(),
        reverser=FakeReverser(),
        ids=SequenceIDs(),
    )


@pytest.fixture()
def state(tmp_path: Path, orchestrator: KapacitorOrchestrator) -> AppState:
    """
    AppState for CLI command tests.

    We use a SimpleNamespace rather than the real config to keep tests isolated
    from the environment.
    """
    settings = SimpleNamespace(app_name="kapa-alerts-test", log_level="DEBUG", data_dir=tmp_path)
    return AppState(settings=settings, orchestrator=orchestrator)
