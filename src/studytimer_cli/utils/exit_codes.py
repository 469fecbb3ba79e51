"""
Exit codes for Study Timer CLI.

Semantic exit codes so scripts can tell what went wrong.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# A record or export file could not be written
ERROR_STORAGE = 3
