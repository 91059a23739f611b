"""
Slacker: recurring-task tracker with per-task day-reset boundaries.
"""

__version__ = "0.3.0"
