# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "SLACKER_APP_NAME": "Name shown in notifications (default: Slacker).",
    "SLACKER_LOG_LEVEL": "Console logging level (default: INFO).",
    # Switches
    "SLACKER_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    "SLACKER_NOTIFICATIONS_ENABLED": "Run the per-minute notification tick (true/false, default: true).",
    # Scheduler
    "SLACKER_NOTIFY_INTERVAL_SECONDS": "Seconds between notification checks (default: 60).",
    # Console view
    "SLACKER_SORT_MODE": "Initial sort mode: default | alphabetical | reset-time.",
    "SLACKER_SUGGEST_LIMIT": "Max titles returned by /suggest (default: 8).",
    # Paths (gitignored)
    "SLACKER_DATA_DIR": "Local data directory (default: .local/slacker).",
    "SLACKER_TASKS_DB_PATH": "SQLite path (default: <data_dir>/slacker.sqlite3).",
    "SLACKER_LOG_DIR": "Directory for slacker.log (default: <data_dir>).",
}
