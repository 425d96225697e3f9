"""Slot grid generation."""

from typing import List

from salon.scheduling.errors import InvalidInputError
from salon.scheduling.timeutil import format_hhmm, parse_hhmm


def generate_grid(opening_time: str, closing_time: str, granularity_minutes: int) -> List[str]:
    """
    Start times from opening (inclusive) every `granularity_minutes` while
    before closing. Starts whose appointment would run past closing are
    left in; the engine rejects those against the requested duration.
    """
    if granularity_minutes <= 0:
        raise InvalidInputError("Slot granularity must be positive")

    current = parse_hhmm(opening_time)
    end = parse_hhmm(closing_time)

    slots = []
    while current < end:
        slots.append(format_hhmm(current))
        current += granularity_minutes
    return slots
