"""CLI command groups for Study Timer."""
