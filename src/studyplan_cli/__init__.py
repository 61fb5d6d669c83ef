"""StudyPlan CLI - an offline-first academic planner for classes and tasks."""

__version__ = "0.3.0"
