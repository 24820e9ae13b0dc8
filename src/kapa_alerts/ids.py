# src/kapa_alerts/ids.py

"""
Task identity allocation.

Every task this package creates is named PREFIX + <unique token>. The prefix
marks provenance: tasks without it were authored by some other tool and are
never used as names for new tasks.
"""

from __future__ import annotations

import uuid

from .core.errors import AllocationError

PREFIX = "chronograf-v1-"


class UUIDGenerator:
    """Random (uuid4) token source."""

    def generate(self) -> str:
        try:
            return str(uuid.uuid4())
        except Exception as e:
            raise AllocationError(f"unable to generate task id: {e}") from e


def make_task_id(token: str) -> str:
    token = (token or "").strip()
    if not token:
        raise AllocationError("id generator returned an empty token")
    return PREFIX + token


def is_managed_id(task_id: str) -> bool:
    return task_id.startswith(PREFIX) and len(task_id) > len(PREFIX)
