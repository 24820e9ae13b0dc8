# src/kapa_alerts/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs one command and prints its output.
Exit codes: 0 ok, 1 engine/translation error, 2 usage error.
"""

from __future__ import annotations

import logging
import sys

from ..config import get_settings
from ..core.errors import KapaAlertsError
from ..logging_setup import setup_logging
from .bootstrap import create_initial_state, shutdown
from .commands import UsageError, registry

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    try:
        output = registry.handle(state, argv)
    except UsageError as e:
        print(str(e), file=sys.stderr)
        return 2
    except KapaAlertsError as e:
        logger.debug("Command failed.", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        shutdown(state)

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
