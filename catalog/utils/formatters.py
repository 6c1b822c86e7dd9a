# catalog/utils/formatters.py
from datetime import datetime
from typing import Optional
import pytz
from ..config import Config

def now_utc() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(pytz.utc)

def format_datetime(dt: Optional[datetime]) -> str:
    """Format a timestamp in the configured display timezone"""
    if dt is None:
        return "-"
    display_tz = pytz.timezone(Config.TIMEZONE)
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(display_tz).strftime("%Y-%m-%d %H:%M:%S")

def format_duration(hours: Optional[float]) -> str:
    """Course duration for display"""
    if hours is None:
        return "-"
    return f"{hours:,.1f}h"
