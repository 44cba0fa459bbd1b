"""Display formatting helpers."""

import math


def _format_seconds(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_duration(total_seconds: float) -> str:
    """Format a duration in seconds as ``<H>h<M>m<S>s`` (e.g. ``1h1m1s``).

    Hours and minutes are truncated; the seconds part is the plain
    remainder, so fractional input keeps its fraction (``61.5`` gives
    ``0h1m1.5s``).
    """
    seconds = total_seconds % 60
    minutes = math.floor(total_seconds / 60) % 60
    hours = math.floor(total_seconds / 3600)
    return f"{hours}h{minutes}m{_format_seconds(seconds)}s"
