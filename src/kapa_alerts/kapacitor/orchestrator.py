# src/kapa_alerts/kapacitor/orchestrator.py

"""
Alert task lifecycle on a Kapacitor engine.

The orchestrator turns alert rules into TICKscript tasks and back:
- create: allocate a prefixed id, translate, submit one create call
- update: disable+apply in one call, then enable (two phases, see apply_update)
- enable / disable / delete / status: single engine calls
- get / all: fetch tasks and reverse their scripts, degrading per task when
  the script cannot be parsed

It keeps no state between calls; everything lives in the engine.
Concurrent updates to the same task are not serialized here.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..config import KapacitorConfig
from ..core.errors import (
    AllocationError,
    EngineError,
    PartialUpdateError,
    TaskNotFoundError,
    TranslationError,
)
from ..core.models import (
    AlertRule,
    EngineTask,
    Reversed,
    RuleLookup,
    Task,
    TaskStatus,
    Unparsed,
    UpdateOutcome,
    UpdatePhase,
    dbrps_for,
    task_type_for,
)
from ..core.ports import IDGenerator, ScriptReverser, ScriptTranslator, TaskEngine
from ..ids import UUIDGenerator, is_managed_id, make_task_id
from .http_client import TASKS_PATH, KapacitorHTTPClient

logger = logging.getLogger(__name__)

# Name of the httpOut node every generated script exposes.
HTTP_ENDPOINT = "output"


class KapacitorOrchestrator:
    def __init__(
        self,
        engine: TaskEngine,
        *,
        translator: ScriptTranslator,
        reverser: ScriptReverser,
        ids: IDGenerator | None = None,
    ) -> None:
        self.engine = engine
        self.translator = translator
        self.reverser = reverser
        self.ids: IDGenerator = ids if ids is not None else UUIDGenerator()

    @classmethod
    def from_config(
        cls,
        config: KapacitorConfig,
        *,
        translator: ScriptTranslator,
        reverser: ScriptReverser,
        ids: IDGenerator | None = None,
    ) -> KapacitorOrchestrator:
        """Build an orchestrator talking to the Kapacitor described by `config`."""
        return cls(KapacitorHTTPClient(config), translator=translator, reverser=reverser, ids=ids)

    # ---- references ----

    @staticmethod
    def href(task_id: str) -> str:
        return f"{TASKS_PATH}/{task_id}"

    @staticmethod
    def href_output(task_id: str) -> str:
        return f"{TASKS_PATH}/{task_id}/{HTTP_ENDPOINT}"

    # ---- helpers ----

    def _new_task_id(self) -> str:
        try:
            token = self.ids.generate()
        except AllocationError:
            raise
        except Exception as e:
            raise AllocationError(f"unable to generate task id: {e}") from e

        task_id = make_task_id(token)
        if not is_managed_id(task_id):
            raise AllocationError(f"refusing to create unprefixed task id {task_id!r}")
        return task_id

    def _translate(self, rule: AlertRule) -> str:
        try:
            return self.translator.generate(rule)
        except TranslationError:
            raise
        except Exception as e:
            raise TranslationError(f"unable to generate script for rule {rule.name or rule.id!r}: {e}") from e

    def _reverse(self, task: EngineTask) -> RuleLookup:
        try:
            rule = self.reverser.reverse(task.script)
            if not isinstance(rule, AlertRule):
                raise TypeError(f"reverser returned {type(rule).__name__}, not AlertRule")
            rule = replace(rule, id=task.id, tick_script=task.script)
        except Exception as e:
            logger.debug("Task %s: script not recognized (%s), keeping raw script", task.id, e)
            return Unparsed(task_id=task.id, script=task.script)
        return Reversed(rule)

    def _status_task(self, task: EngineTask, href: str) -> Task:
        return Task(
            id=task.id,
            href=task.href or href,
            href_output=self.href_output(task.id),
            rule=None,
            tick_script=task.script,
        )

    # ---- lifecycle ----

    def create(self, rule: AlertRule) -> Task:
        """Create and enable a task for `rule`. Nothing is created unless the final engine call succeeds."""
        task_id = self._new_task_id()
        script = self._translate(rule)

        rule = replace(rule, id=task_id)
        created = self.engine.create_task(
            task_id=task_id,
            task_type=task_type_for(rule.query),
            dbrps=dbrps_for(rule.query),
            script=script,
            status=TaskStatus.ENABLED,
        )
        logger.info("Created task %s (%s)", task_id, task_type_for(rule.query))

        return Task(
            id=task_id,
            href=created.href or self.href(task_id),
            href_output=self.href_output(task_id),
            rule=rule,
            tick_script=script,
        )

    def delete(self, href: str) -> None:
        self.engine.delete_task(href)
        logger.info("Deleted task %s", href)

    def _update_status(self, href: str, status: TaskStatus) -> Task:
        task = self.engine.update_task(href, status=status)
        return self._status_task(task, href)

    def enable(self, href: str) -> Task:
        return self._update_status(href, TaskStatus.ENABLED)

    def disable(self, href: str) -> Task:
        return self._update_status(href, TaskStatus.DISABLED)

    def apply_update(self, href: str, rule: AlertRule) -> UpdateOutcome:
        """
        Replace the task's script and bindings, then re-enable it.

        Phase 1 sets script, bindings, kind and status=disabled in one call (the
        engine needs the task quiesced while it is replaced). Phase 2 enables it.
        Engine failures are recorded on the outcome rather than raised:
        - phase 1 failed: phase NONE, task untouched
        - phase 2 failed: phase APPLIED, task left disabled, PartialUpdateError

        TranslationError is raised directly; no engine call is made in that case.
        """
        script = self._translate(rule)

        try:
            applied = self.engine.update_task(
                href,
                script=script,
                dbrps=dbrps_for(rule.query),
                task_type=task_type_for(rule.query),
                status=TaskStatus.DISABLED,
            )
        except EngineError as e:
            logger.warning("Update of %s failed, task unchanged: %s", href, e)
            return UpdateOutcome(href=href, phase=UpdatePhase.NONE, error=e)

        task = Task(
            id=applied.id,
            href=applied.href or href,
            href_output=self.href_output(applied.id),
            rule=rule,
            tick_script=script,
        )

        try:
            self.enable(href)
        except EngineError as e:
            logger.warning("Task %s updated but could not be re-enabled, left disabled: %s", task.id, e)
            err = PartialUpdateError(
                f"task {task.id} updated but left disabled: {e.message}",
                href=href,
                task=task,
                status_code=e.status_code,
            )
            err.__cause__ = e
            return UpdateOutcome(href=href, phase=UpdatePhase.APPLIED, task=task, error=err)

        logger.info("Updated task %s", task.id)
        return UpdateOutcome(href=href, phase=UpdatePhase.ENABLED, task=task)

    def update(self, href: str, rule: AlertRule) -> Task:
        return self.apply_update(href, rule).unwrap()

    # ---- queries ----

    def lookup(self, task_id: str) -> RuleLookup:
        """Fetch one task and reverse its script. Fetch failures are fatal; parse failures degrade."""
        href = self.href(task_id)
        try:
            task = self.engine.get_task(href)
        except EngineError as e:
            raise TaskNotFoundError(f"alert {task_id} not found: {e}") from e
        return self._reverse(task)

    def get(self, task_id: str) -> AlertRule:
        return self.lookup(task_id).rule

    def all_lookups(self) -> dict[str, RuleLookup]:
        return {task.id: self._reverse(task) for task in self.engine.list_tasks()}

    def all(self) -> dict[str, AlertRule]:
        return {task_id: found.rule for task_id, found in self.all_lookups().items()}

    def status(self, href: str) -> str:
        return self.engine.get_task(href).status

    def all_status(self) -> dict[str, str]:
        # The engine always returns id and link; ask for status only to skip script bodies.
        return {task.id: task.status for task in self.engine.list_tasks(fields=["status"])}
