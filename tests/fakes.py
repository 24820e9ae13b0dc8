# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field

from kapa_alerts.core.errors import EngineError, ReverseTranslationError, TranslationError
from kapa_alerts.core.models import DBRP, AlertRule, EngineTask, QueryConfig, TaskStatus
from kapa_alerts.kapacitor.http_client import TASKS_PATH


@dataclass(slots=True)
class StoredTask:
    id: str
    type: str
    dbrps: list[DBRP]
    script: str
    status: str


@dataclass(slots=True)
class EngineCall:
    op: str
    href: str | None
    kwargs: dict


class FakeEngine:
    """
    In-memory TaskEngine used by orchestrator tests.

    - Records every call (op, href, kwargs) for ordering assertions
    - fail_on: op name -> EngineError to raise for that op
    - fail_when: predicate(op, kwargs) -> bool, for finer-grained failures
      (e.g. only the update that sets status=enabled)
    """

    def __init__(self) -> None:
        self.tasks: dict[str, StoredTask] = {}
        self.calls: list[EngineCall] = []
        self.fail_on: dict[str, EngineError] = {}
        self.fail_when = None

    def _check(self, op: str, kwargs: dict) -> None:
        if op in self.fail_on:
            raise self.fail_on[op]
        if self.fail_when is not None and self.fail_when(op, kwargs):
            raise EngineError(f"injected failure on {op}", status_code=500)

    def _id_from_href(self, href: str) -> str:
        prefix = TASKS_PATH + "/"
        if not href.startswith(prefix):
            raise EngineError(f"bad href {href}", status_code=400)
        return href[len(prefix):]

    def _view(self, t: StoredTask, fields: list[str] | None = None) -> EngineTask:
        full = EngineTask(
            id=t.id,
            href=f"{TASKS_PATH}/{t.id}",
            type=t.type,
            dbrps=list(t.dbrps),
            script=t.script,
            status=t.status,
        )
        if fields is None:
            return full
        return EngineTask(
            id=full.id,
            href=full.href,
            type=full.type if "type" in fields else "",
            dbrps=full.dbrps if "dbrps" in fields else [],
            script=full.script if "script" in fields else "",
            status=full.status if "status" in fields else "",
        )

    def add(self, task_id: str, script: str, status: str = "enabled", type: str = "stream") -> None:
        self.tasks[task_id] = StoredTask(
            id=task_id, type=type, dbrps=[DBRP("telegraf", "autogen")], script=script, status=status
        )

    def create_task(self, *, task_id, task_type, dbrps, script, status) -> EngineTask:
        kwargs = dict(task_id=task_id, task_type=task_type, dbrps=dbrps, script=script, status=status)
        self.calls.append(EngineCall("create", None, kwargs))
        self._check("create", kwargs)
        if task_id in self.tasks:
            raise EngineError(f"task {task_id} already exists", status_code=400)
        self.tasks[task_id] = StoredTask(
            id=task_id, type=str(task_type), dbrps=list(dbrps), script=script, status=str(status)
        )
        return self._view(self.tasks[task_id])

    def update_task(self, href, *, script=None, dbrps=None, task_type=None, status=None) -> EngineTask:
        kwargs = dict(script=script, dbrps=dbrps, task_type=task_type, status=status)
        self.calls.append(EngineCall("update", href, kwargs))
        self._check("update", kwargs)
        task_id = self._id_from_href(href)
        t = self.tasks.get(task_id)
        if t is None:
            raise EngineError(f"no task exists with id {task_id}", status_code=404)
        if script is not None:
            t.script = script
        if dbrps is not None:
            t.dbrps = list(dbrps)
        if task_type is not None:
            t.type = str(task_type)
        if status is not None:
            t.status = str(status)
        return self._view(t)

    def delete_task(self, href) -> None:
        self.calls.append(EngineCall("delete", href, {}))
        self._check("delete", {})
        task_id = self._id_from_href(href)
        if task_id not in self.tasks:
            raise EngineError(f"no task exists with id {task_id}", status_code=404)
        del self.tasks[task_id]

    def get_task(self, href) -> EngineTask:
        self.calls.append(EngineCall("get", href, {}))
        self._check("get", {})
        task_id = self._id_from_href(href)
        t = self.tasks.get(task_id)
        if t is None:
            raise EngineError(f"no task exists with id {task_id}", status_code=404)
        return self._view(t)

    def list_tasks(self, *, fields=None) -> list[EngineTask]:
        kwargs = dict(fields=fields)
        self.calls.append(EngineCall("list", None, kwargs))
        self._check("list", kwargs)
        return [self._view(t, fields) for t in self.tasks.values()]


class SequenceIDs:
    """Deterministic ids: t1, t2, ..."""

    def __init__(self) -> None:
        self.n = 0

    def generate(self) -> str:
        self.n += 1
        return f"t{self.n}"


class FakeTranslator:
    """
    Renders a tiny fake script: `rule <name> db=<db> rp=<rp> [raw=<raw>]`.

    Rules named "bad" cannot be translated.
    """

    def __init__(self) -> None:
        self.calls: list[AlertRule] = []

    def generate(self, rule: AlertRule) -> str:
        self.calls.append(rule)
        if rule.name == "bad":
            raise TranslationError("cannot translate rule 'bad'")
        q = rule.query
        script = f"rule {rule.name} db={q.database} rp={q.retention_policy}"
        if q.raw_text:
            script += f" raw={q.raw_text}"
        return script


class FakeReverser:
    """Parses scripts produced by FakeTranslator; anything else is rejected."""

    def reverse(self, script: str) -> AlertRule:
        parts = script.split()
        if len(parts) < 4 or parts[0] != "rule":
            raise ReverseTranslationError(f"unrecognized script: {script[:20]!r}")
        kv = dict(p.split("=", 1) for p in parts[2:] if "=" in p)
        return AlertRule(
            name=parts[1],
            query=QueryConfig(
                database=kv.get("db", ""),
                retention_policy=kv.get("rp", ""),
                raw_text=kv.get("raw"),
            ),
        )


@dataclass(slots=True)
class CrashingReverser:
    """Reverser that fails with an arbitrary (non-ReverseTranslationError) exception."""

    seen: list[str] = field(default_factory=list)

    def reverse(self, script: str) -> AlertRule:
        self.seen.append(script)
        raise ValueError("boom")


def enabled_status_update(op: str, kwargs: dict) -> bool:
    """fail_when predicate: only the pure enable call (status=enabled, no script)."""
    return op == "update" and kwargs.get("status") == TaskStatus.ENABLED and kwargs.get("script") is None
