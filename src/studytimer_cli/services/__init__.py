"""Service layer for Study Timer."""
