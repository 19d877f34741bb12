"""Database layer for fenci."""
