# src/kapa_alerts/kapacitor/scripts.py

"""
Built-in script translators.

The real TICKscript grammar lives elsewhere; these cover the operator CLI,
where rules arrive with a hand-written script and nothing parses scripts back.
"""

from __future__ import annotations

from ..core.errors import ReverseTranslationError, TranslationError
from ..core.models import AlertRule


class PassthroughTranslator:
    """Uses the script the rule already carries."""

    def generate(self, rule: AlertRule) -> str:
        script = rule.tick_script or ""
        if not script.strip():
            raise TranslationError(f"rule {rule.name or rule.id or '<unnamed>'} has no script")
        return script


class NullReverser:
    """Never recognizes a script, so every rule read back is the degraded form."""

    def reverse(self, script: str) -> AlertRule:
        raise ReverseTranslationError("no script parser configured")
