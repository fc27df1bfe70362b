"""Small numeric and clock formatting helpers used by the reporting layer."""
import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative values (2.5 -> 3, not 2)."""
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded


def percentage(part: float, whole: float) -> int:
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def format_clock(hour: float) -> str:
    """Format a fractional hour (9.5) as HH:MM (09:30)."""
    h = math.floor(hour)
    m = round_half_up((hour - h) * 60)
    if m == 60:
        h, m = h + 1, 0
    return f"{h:02d}:{m:02d}"


def clock_to_minutes(clock: str) -> int:
    hours, minutes = clock.split(':')
    return int(hours) * 60 + int(minutes)
