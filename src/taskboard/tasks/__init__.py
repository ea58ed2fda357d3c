"""
Task subsystem.

Components:
- task_models.py: data structures (Task, User, TaskStatus, TaskPriority)
- task_filter.py: the search/filter evaluator, FilterCriteria, pagination
- task_board.py: list and kanban renderings
- task_store.py: SQLite-backed storage + search/statistics helpers
- task_api.py: user-facing actions (validation, error messages)
"""
