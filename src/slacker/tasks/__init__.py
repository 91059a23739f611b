"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskView, RecurrenceType) and input parsing
- recurrence.py: does a recurrence rule apply to a date
- effective_date.py: which date a completion is attributed to (custom reset times)
- task_views.py: per-date task list with completion flags and sort order
- task_store.py: SQLite-backed storage; migrations.py: versioned schema steps
- task_scheduler.py: per-minute reminder / reset notification tick
- task_api.py: command surface used by the console and tests
"""
