# src/kapa_alerts/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..core.models import AlertRule, QueryConfig, Reversed, UpdatePhase
from ..core.state import AppState
from ..ids import is_managed_id

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Bad command line; the message is shown to the user as-is."""


class CommandRegistry:
    """Simple command registry: `kapa-alerts <command> [args...]`."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, argv: list[str]) -> str:
        """Dispatch argv (command first). Raises UsageError for unknown commands."""
        if not argv:
            raise UsageError("No command given. Use `help` to list available commands.")

        name = argv[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            raise UsageError(f"Unknown command: {name}. Use `help` to list available commands.")

        logger.debug("Running command %s args=%s", name, argv[1:])
        return handler(state, argv[1:])

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_opts(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate positional args from --key=value options."""
    positional: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        if a.startswith("--") and "=" in a:
            key, _, value = a[2:].partition("=")
            opts[key.lower()] = value
        else:
            positional.append(a)
    return positional, opts


def _need(args: list[str], n: int, usage: str) -> None:
    if len(args) < n:
        raise UsageError(f"usage: {usage}")


def _rule_from_args(args: list[str], opts: dict[str, str]) -> AlertRule:
    script_file, db, rp = args[0], args[1], args[2]
    try:
        script = Path(script_file).read_text("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise UsageError(f"cannot read {script_file}: {e}") from e

    return AlertRule(
        name=opts.get("name", Path(script_file).stem),
        query=QueryConfig(database=db, retention_policy=rp, raw_text=opts.get("query") or None),
        tick_script=script,
    )


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_ping(state: AppState, args: list[str]) -> str:
    ping = getattr(state.orchestrator.engine, "ping", None)
    if not callable(ping):
        return "Engine client does not support ping."
    version = ping()
    return f"OK (kapacitor {version or 'unknown version'})"


def cmd_list(state: AppState, args: list[str]) -> str:
    rules = state.orchestrator.all()
    if not rules:
        return "No tasks."
    lines = []
    for task_id in sorted(rules):
        # External tasks are shown but flagged: they were not created by us.
        marker = " " if is_managed_id(task_id) else "*"
        lines.append(f"{marker} {task_id}  {rules[task_id].name}")
    return "\n".join(lines)


def cmd_status(state: AppState, args: list[str]) -> str:
    orch = state.orchestrator
    if args:
        return orch.status(orch.href(args[0]))

    statuses = orch.all_status()
    if not statuses:
        return "No tasks."
    return "\n".join(f"{task_id}  {statuses[task_id]}" for task_id in sorted(statuses))


def cmd_get(state: AppState, args: list[str]) -> str:
    _need(args, 1, "get <task_id>")
    found = state.orchestrator.lookup(args[0])
    rule = found.rule
    q = rule.query
    lines = [
        f"id: {rule.id}",
        f"name: {rule.name}",
        f"parsed: {'yes' if isinstance(found, Reversed) else 'no (raw script only)'}",
    ]
    if q.database or q.retention_policy:
        lines.append(f"binding: {q.database}.{q.retention_policy}")
    lines.append("")
    lines.append(rule.tick_script)
    return "\n".join(lines)


def cmd_enable(state: AppState, args: list[str]) -> str:
    _need(args, 1, "enable <task_id>")
    orch = state.orchestrator
    task = orch.enable(orch.href(args[0]))
    return f"Enabled {task.id}."


def cmd_disable(state: AppState, args: list[str]) -> str:
    _need(args, 1, "disable <task_id>")
    orch = state.orchestrator
    task = orch.disable(orch.href(args[0]))
    return f"Disabled {task.id}."


def cmd_delete(state: AppState, args: list[str]) -> str:
    _need(args, 1, "delete <task_id>")
    orch = state.orchestrator
    orch.delete(orch.href(args[0]))
    return f"Deleted {args[0]}."


def cmd_create(state: AppState, args: list[str]) -> str:
    positional, opts = _split_opts(args)
    _need(positional, 3, "create <script_file> <db> <rp> [--query=<raw>] [--name=<name>]")
    task = state.orchestrator.create(_rule_from_args(positional, opts))
    return f"Created {task.id}\n  href: {task.href}\n  output: {task.href_output}"


def cmd_update(state: AppState, args: list[str]) -> str:
    positional, opts = _split_opts(args)
    _need(positional, 4, "update <task_id> <script_file> <db> <rp> [--query=<raw>] [--name=<name>]")
    orch = state.orchestrator
    task_id = positional[0]

    outcome = orch.apply_update(orch.href(task_id), _rule_from_args(positional[1:], opts))
    if outcome.phase is UpdatePhase.APPLIED:
        # Script is in place but the task stays disabled until enabled again.
        logger.warning("Task %s left disabled; run `enable %s` to resume it.", task_id, task_id)
    task = outcome.unwrap()
    return f"Updated {task.id}."


registry.register("help", cmd_help, "list commands", aliases=["-h", "--help"])
registry.register("ping", cmd_ping, "check that kapacitor is reachable")
registry.register("list", cmd_list, "list all tasks (* = not created by kapa-alerts)", aliases=["ls"])
registry.register("status", cmd_status, "status of one task, or of all tasks")
registry.register("get", cmd_get, "show the rule and script of a task")
registry.register("enable", cmd_enable, "enable a task")
registry.register("disable", cmd_disable, "disable a task")
registry.register("delete", cmd_delete, "delete a task", aliases=["rm"])
registry.register("create", cmd_create, "create a task from a TICKscript file")
registry.register("update", cmd_update, "replace a task's TICKscript and bindings")
