"""Occupancy footprint of a set of services booked together."""

from dataclasses import dataclass
from typing import Iterable

from salon.scheduling.errors import InvalidInputError


@dataclass(frozen=True)
class ServiceFootprint:
    """
    Total duration plus at most one processing gap.

    `processing_wait_time` is measured from the start of the booking, so a
    gap belonging to the second service is shifted by the first service's
    duration.
    """

    duration: int
    processing_wait_time: int = 0
    processing_duration: int = 0

    def __post_init__(self):
        if self.duration < 0 or self.processing_wait_time < 0 or self.processing_duration < 0:
            raise InvalidInputError("Durations cannot be negative")
        if self.processing_duration and self.processing_wait_time + self.processing_duration > self.duration:
            raise InvalidInputError("Processing gap must fit inside the service duration")

    @property
    def has_gap(self) -> bool:
        return self.processing_duration > 0


def combine_footprints(footprints: Iterable[ServiceFootprint]) -> ServiceFootprint:
    """
    Footprint of services performed back to back in the given order.

    Only one gap is supported per booking, so the first service with a
    processing gap supplies it and later gaps count as active time.
    """
    total = 0
    wait = 0
    gap = 0
    for footprint in footprints:
        if not gap and footprint.has_gap:
            wait = total + footprint.processing_wait_time
            gap = footprint.processing_duration
        total += footprint.duration

    if total <= 0:
        raise InvalidInputError("At least one service with a positive duration is required")

    return ServiceFootprint(duration=total, processing_wait_time=wait, processing_duration=gap)
