# src/kapa_alerts/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any

from .errors import EngineError


class TaskType(StrEnum):
    """Kind of engine task: streaming (pushed points) or batch (scheduled query)."""

    STREAM = "stream"
    BATCH = "batch"


class TaskStatus(StrEnum):
    ENABLED = "enabled"
    DISABLED = "disabled"


@dataclass(frozen=True, slots=True)
class DBRP:
    """Database + retention policy binding a task reads from."""

    database: str
    retention_policy: str


@dataclass(slots=True)
class QueryConfig:
    database: str = ""
    retention_policy: str = ""
    # Raw query text; empty/None means the rule is built from the structured query.
    raw_text: str | None = None


@dataclass(slots=True)
class AlertRule:
    """
    Internal alert rule.

    `id` stays empty until the rule is bound to a remote task.
    `params` holds everything else the rule carries; the orchestrator never looks inside.
    """

    id: str = ""
    name: str = ""
    query: QueryConfig = field(default_factory=QueryConfig)
    tick_script: str = ""
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Task:
    id: str
    href: str
    href_output: str
    # None when the task comes back from a pure status change.
    rule: AlertRule | None
    tick_script: str


@dataclass(slots=True)
class EngineTask:
    """A task as reported by the remote engine."""

    id: str
    href: str
    type: str = ""
    dbrps: list[DBRP] = field(default_factory=list)
    script: str = ""
    status: str = ""


@dataclass(frozen=True, slots=True)
class Reversed:
    """Script was parsed back into a structured rule."""

    rule: AlertRule


@dataclass(frozen=True, slots=True)
class Unparsed:
    """Script did not match the expected shape; only the id and raw script are known."""

    task_id: str
    script: str

    @property
    def rule(self) -> AlertRule:
        return AlertRule(id=self.task_id, name=self.task_id, tick_script=self.script)


RuleLookup = Reversed | Unparsed


class UpdatePhase(Enum):
    NONE = 0  # nothing applied; task is in its prior state
    APPLIED = 1  # new script/bindings applied, task disabled
    ENABLED = 2  # task re-enabled


@dataclass(slots=True)
class UpdateOutcome:
    """
    Result of the disable+apply -> enable update protocol.

    `task` is set once phase 1 succeeded. `error` is set when a phase failed;
    with phase APPLIED the remote task is left disabled.
    """

    href: str
    phase: UpdatePhase
    task: Task | None = None
    error: EngineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.phase is UpdatePhase.ENABLED

    def unwrap(self) -> Task:
        if self.error is not None:
            raise self.error
        if self.task is None:
            raise EngineError(f"update of {self.href} produced no task")
        return self.task


def task_type_for(query: QueryConfig) -> TaskType:
    """Queries without raw text run as stream tasks; raw queries run as batch tasks."""
    if not query.raw_text:
        return TaskType.STREAM
    return TaskType.BATCH


def dbrps_for(query: QueryConfig) -> list[DBRP]:
    return [DBRP(database=query.database, retention_policy=query.retention_policy)]
