"""Dictionary data loading for fenci."""
