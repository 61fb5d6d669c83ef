"""Command modules of the StudyPlan CLI."""
