# app/services/guestlist.py
"""
Guestlist capacity math.

Everything here is a pure read-time projection over an event and its
bookings: nothing is cached or written, so listings must call it on
every read.
"""
from dataclasses import dataclass
from typing import Iterable, Protocol


class HeadCount(Protocol):
    couples: int
    ladies: int
    stags: int


class GuestlistLimits(Protocol):
    guestlist_status: str
    guestlist_limit: int | None
    closing_threshold: int | None


@dataclass(frozen=True)
class GuestlistSummary:
    total_guests: int
    spots_remaining: int | None


def guests_in(booking: HeadCount) -> int:
    """A couple counts as two guests."""
    return booking.couples * 2 + booking.ladies + booking.stags


def total_guests(bookings: Iterable[HeadCount]) -> int:
    return sum(guests_in(b) for b in bookings)


def spots_remaining(guestlist_limit: int | None, total: int) -> int | None:
    """
    Remaining capacity, or None when the event has no limit.

    Not clamped: an overbooked event reports a negative number.
    """
    if guestlist_limit is None:
        return None
    return guestlist_limit - total


def summarize(event: GuestlistLimits, bookings: Iterable[HeadCount]) -> GuestlistSummary:
    total = total_guests(bookings)
    return GuestlistSummary(
        total_guests=total,
        spots_remaining=spots_remaining(event.guestlist_limit, total),
    )


def next_guestlist_status(event: GuestlistLimits, total: int) -> str:
    """
    Status an event should move to once it holds `total` guests.

    Only applies when both a limit and a closing threshold are set:
      - no spots left           -> "closed"
      - spots <= threshold      -> "closing" (only from "open")
    Otherwise the current status is kept.
    """
    if event.guestlist_limit is None or event.closing_threshold is None:
        return event.guestlist_status

    remaining = event.guestlist_limit - total
    if remaining <= 0:
        return "closed"
    if remaining <= event.closing_threshold and event.guestlist_status == "open":
        return "closing"
    return event.guestlist_status


def scanned_guests(bookings: Iterable[HeadCount]) -> int:
    """Guests whose booking has been checked in at the door."""
    return sum(guests_in(b) for b in bookings if getattr(b, "scanned_at", None) is not None)
