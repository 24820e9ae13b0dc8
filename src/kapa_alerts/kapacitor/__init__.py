"""
Kapacitor integration.

Components:
- orchestrator.py: task lifecycle (create/update/enable/disable/delete/get/all/status)
- http_client.py: httpx adapter for the Kapacitor v1 task API
- scripts.py: built-in translators used by the CLI
"""

from .http_client import KapacitorHTTPClient
from .orchestrator import HTTP_ENDPOINT, KapacitorOrchestrator

__all__ = ["HTTP_ENDPOINT", "KapacitorHTTPClient", "KapacitorOrchestrator"]
