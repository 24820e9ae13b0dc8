# src/kapa_alerts/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the httpx engine client and the built-in translators into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..kapacitor.orchestrator import KapacitorOrchestrator
from ..kapacitor.scripts import NullReverser, PassthroughTranslator

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    config = settings.kapacitor()
    logger.debug("Using kapacitor url=%s auth=%s", config.url, "yes" if config.auth else "no")

    orchestrator = KapacitorOrchestrator.from_config(
        config,
        translator=PassthroughTranslator(),
        reverser=NullReverser(),
    )
    return AppState(settings=settings, orchestrator=orchestrator)


def shutdown(state: AppState) -> None:
    """Release the engine connection pool (best-effort)."""
    close = getattr(state.orchestrator.engine, "close", None)
    if callable(close):
        try:
            close()
        except Exception:
            logger.debug("Engine client close failed.", exc_info=True)
