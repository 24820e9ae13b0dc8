# src/kapa_alerts/core/errors.py

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Task


class KapaAlertsError(Exception):
    """Base class for every error raised by this package."""


class AllocationError(KapaAlertsError):
    """The task id source failed to produce an identifier."""


class TranslationError(KapaAlertsError):
    """An alert rule could not be turned into a script."""


class ReverseTranslationError(KapaAlertsError):
    """
    A script could not be turned back into an alert rule.

    The orchestrator never lets this escape from get/all: it degrades to a rule
    built from the task id and the raw script instead.
    """


class TaskNotFoundError(KapaAlertsError):
    """Fetching a specific task failed (absent, or the engine could not be reached)."""


class EngineError(KapaAlertsError):
    """Any other failure reported by the remote task engine (transport, auth, validation)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class PartialUpdateError(EngineError):
    """
    Update applied the new script but could not re-enable the task.

    The task is left disabled. `task` is the result of the applied (disabled)
    update; retry with enable(href).
    """

    def __init__(
        self,
        message: str,
        *,
        href: str,
        task: Task | None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code)
        self.href = href
        self.task = task
