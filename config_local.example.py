# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for everything else. Only these switches are read from here.
"""

# Example: run notifications only, without the interactive console
# CONSOLE_ENABLED = False

# Example: keep the console but silence reminders
# NOTIFICATIONS_ENABLED = False
