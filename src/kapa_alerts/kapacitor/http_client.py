# src/kapa_alerts/kapacitor/http_client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import KapacitorConfig
from ..core.errors import EngineError
from ..core.models import DBRP, EngineTask, TaskStatus, TaskType

logger = logging.getLogger(__name__)

TASKS_PATH = "/kapacitor/v1/tasks"
PING_PATH = "/kapacitor/v1/ping"
VERSION_HEADER = "X-Kapacitor-Version"


def _dbrps_to_json(dbrps: list[DBRP]) -> list[dict[str, str]]:
    return [{"db": d.database, "rp": d.retention_policy} for d in dbrps]


def _task_from_json(data: dict[str, Any]) -> EngineTask:
    link = data.get("link") or {}
    dbrps = [
        DBRP(database=str(d.get("db", "")), retention_policy=str(d.get("rp", "")))
        for d in (data.get("dbrps") or [])
        if isinstance(d, dict)
    ]
    return EngineTask(
        id=str(data.get("id", "")),
        href=str(link.get("href", "")) if isinstance(link, dict) else "",
        type=str(data.get("type", "") or ""),
        dbrps=dbrps,
        script=str(data.get("script", "") or ""),
        status=str(data.get("status", "") or ""),
    )


def _error_message(resp: httpx.Response) -> str:
    """Kapacitor reports failures as {"error": "..."}; fall back to the raw body."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    text = resp.text.strip()
    return text or resp.reason_phrase or "request failed"


class KapacitorHTTPClient:
    """
    TaskEngine implementation speaking the Kapacitor v1 task API over httpx.

    Engine failures are surfaced unchanged as EngineError (message + HTTP status).
    The client holds only a connection pool; close() it (or use it as a context
    manager) when done.
    """

    def __init__(self, config: KapacitorConfig, *, transport: httpx.BaseTransport | None = None) -> None:
        self.config = config
        self._http = httpx.Client(
            base_url=config.url,
            auth=config.auth,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> KapacitorHTTPClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise EngineError(f"{method} {url}: {e}") from e

        if resp.is_error:
            msg = _error_message(resp)
            logger.debug("Kapacitor %s %s -> %s: %s", method, url, resp.status_code, msg)
            raise EngineError(msg, status_code=resp.status_code)
        return resp

    def _json(self, resp: httpx.Response) -> dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as e:
            raise EngineError(f"invalid JSON from kapacitor: {e}", status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise EngineError("unexpected response shape from kapacitor", status_code=resp.status_code)
        return data

    # ---- TaskEngine ----

    def create_task(
        self,
        *,
        task_id: str,
        task_type: TaskType,
        dbrps: list[DBRP],
        script: str,
        status: TaskStatus,
    ) -> EngineTask:
        payload = {
            "id": task_id,
            "type": str(task_type),
            "dbrps": _dbrps_to_json(dbrps),
            "script": script,
            "status": str(status),
        }
        resp = self._request("POST", TASKS_PATH, json=payload)
        return _task_from_json(self._json(resp))

    def update_task(
        self,
        href: str,
        *,
        script: str | None = None,
        dbrps: list[DBRP] | None = None,
        task_type: TaskType | None = None,
        status: TaskStatus | None = None,
    ) -> EngineTask:
        payload: dict[str, Any] = {}
        if script is not None:
            payload["script"] = script
        if dbrps is not None:
            payload["dbrps"] = _dbrps_to_json(dbrps)
        if task_type is not None:
            payload["type"] = str(task_type)
        if status is not None:
            payload["status"] = str(status)

        resp = self._request("PATCH", href, json=payload)
        return _task_from_json(self._json(resp))

    def delete_task(self, href: str) -> None:
        self._request("DELETE", href)

    def get_task(self, href: str) -> EngineTask:
        resp = self._request("GET", href)
        return _task_from_json(self._json(resp))

    def list_tasks(self, *, fields: list[str] | None = None) -> list[EngineTask]:
        """Page through every task (offset/limit) until the engine returns a short page."""
        limit = max(1, int(self.config.page_size))
        out: list[EngineTask] = []
        seen: set[str] = set()
        offset = 0
        while True:
            params: list[tuple[str, str | int]] = [("offset", offset), ("limit", limit)]
            for f in fields or []:
                params.append(("fields", f))

            resp = self._request("GET", TASKS_PATH, params=params)
            raw = self._json(resp).get("tasks") or []
            page = [_task_from_json(t) for t in raw if isinstance(t, dict)]
            fresh = [t for t in page if t.id not in seen]
            seen.update(t.id for t in fresh)
            out.extend(fresh)

            if len(raw) < limit:
                return out
            if not fresh:
                # Full page of ids we already have: the engine is ignoring offset.
                logger.warning("Kapacitor returned a repeated page at offset=%d, stopping", offset)
                return out
            offset += limit

    def ping(self) -> str:
        """Check the engine is reachable; returns its version (may be empty)."""
        resp = self._request("GET", PING_PATH)
        return resp.headers.get(VERSION_HEADER, "")
