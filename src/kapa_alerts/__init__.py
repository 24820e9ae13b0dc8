"""
Kapacitor alert task management.

Components:
- core/: models, errors and ports (interfaces) used by the orchestrator
- ids.py: task identity allocation (prefixed ids)
- kapacitor/: the task lifecycle orchestrator and the httpx engine adapter
- cli/: small operator CLI (kapa-alerts)
"""

__version__ = "0.1.0"
