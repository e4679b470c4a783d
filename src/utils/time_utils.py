"""
Time helpers shared by the modules
"""
from datetime import datetime
from typing import Optional, Union
from loguru import logger

__all__ = ["parse_datetime_field", "format_time"]


def parse_datetime_field(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parses a datetime field coming from the API.

    Args:
        value: ISO string, datetime object or None

    Returns:
        datetime object or None
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, str):
        try:
            # Handle ISO format with 'Z' (UTC)
            value_clean = value.replace('Z', '+00:00')
            return datetime.fromisoformat(value_clean)
        except (ValueError, AttributeError) as e:
            logger.warning(f"Failed to parse datetime: {value}, error: {e}")
            return None

    return None


def format_time(seconds: int) -> str:
    """Seconds as MM:SS (minutes are not wrapped at 60)"""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"
