"""Common utility functions."""

from .geo import calculate_distance, find_nearby

__all__ = [
    "calculate_distance",
    "find_nearby",
]
