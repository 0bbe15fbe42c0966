"""Timestamp helpers."""
import time


def get_timestamp() -> int:
    """Current time as integer seconds since the epoch."""
    return int(time.time())
