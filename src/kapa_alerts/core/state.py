# src/kapa_alerts/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..kapacitor.orchestrator import KapacitorOrchestrator


@dataclass
class AppState:
    """What CLI command handlers get to work with."""

    settings: object
    orchestrator: KapacitorOrchestrator
