# src/kapa_alerts/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the orchestrator.

The orchestrator depends on Protocols instead of concrete implementations.
This keeps the script grammar, the parser and the engine transport swappable
and makes testing easier.
"""

from typing import Protocol

from .models import DBRP, AlertRule, EngineTask, TaskStatus, TaskType


class IDGenerator(Protocol):
    """Source of unique tokens; the orchestrator adds the task prefix."""
    def generate(self) -> str: ...


class ScriptTranslator(Protocol):
    """rule -> script text. Raises TranslationError when the rule cannot be expressed."""
    def generate(self, rule: AlertRule) -> str: ...


class ScriptReverser(Protocol):
    """script text -> best-effort rule. Raises ReverseTranslationError on unexpected shape."""
    def reverse(self, script: str) -> AlertRule: ...


class TaskEngine(Protocol):
    """
    Remote task engine capability set.

    Tasks are addressed by the relative href returned from a previous call.
    Every method raises EngineError on failure; messages are passed through as-is.
    """

    def create_task(
            self,
            *,
            task_id: str,
            task_type: TaskType,
            dbrps: list[DBRP],
            script: str,
            status: TaskStatus,
    ) -> EngineTask: ...

    def update_task(
            self,
            href: str,
            *,
            script: str | None = None,
            dbrps: list[DBRP] | None = None,
            task_type: TaskType | None = None,
            status: TaskStatus | None = None,
    ) -> EngineTask: ...

    def delete_task(self, href: str) -> None: ...
    def get_task(self, href: str) -> EngineTask: ...

    # fields=None returns full tasks; otherwise only id, link and the listed fields.
    def list_tasks(self, *, fields: list[str] | None = None) -> list[EngineTask]: ...
