"""
Utilities Module
"""
from .time_utils import parse_datetime_field, format_time

__all__ = ["parse_datetime_field", "format_time"]
