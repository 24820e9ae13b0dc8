# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real credentials; put them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "KAPA_ALERTS_APP_NAME": "App display name (default: kapa-alerts).",
    "KAPA_ALERTS_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    "KAPA_ALERTS_DATA_DIR": "Local data directory holding kapa-alerts.log (default: .local/kapa-alerts).",
    # Kapacitor
    "KAPA_ALERTS_KAPACITOR_URL": "Kapacitor base URL (default: http://localhost:9092). KAPACITOR_URL also works.",
    "KAPA_ALERTS_KAPACITOR_USERNAME": "Basic auth user; empty => no authentication. KAPACITOR_USERNAME also works.",
    "KAPA_ALERTS_KAPACITOR_PASSWORD": "Basic auth password. KAPACITOR_PASSWORD also works.",
    "KAPA_ALERTS_KAPACITOR_TIMEOUT_SECONDS": "HTTP timeout per request (default: 10).",
    "KAPA_ALERTS_KAPACITOR_PAGE_SIZE": "Tasks fetched per page when listing (default: 100).",
}
