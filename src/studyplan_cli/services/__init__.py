"""Services module for StudyPlan CLI - Business logic layer."""
