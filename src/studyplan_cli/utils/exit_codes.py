"""
Exit codes for StudyPlan CLI.

Semantic exit codes so that scripts wrapping the CLI can tell failures apart.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Authentication failure (not logged in)
ERROR_AUTH_FAILURE = 3

# Network or remote store error
ERROR_NETWORK = 4

# Resource not found
ERROR_NOT_FOUND = 5
