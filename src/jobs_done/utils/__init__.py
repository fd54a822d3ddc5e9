"""Utility helpers for jobs-done."""

from .validation import parse_duration, parse_timestamp, to_local_naive

__all__ = ["parse_duration", "parse_timestamp", "to_local_naive"]
