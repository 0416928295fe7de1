import itertools
import unittest
from dataclasses import dataclass

from app.services.guestlist import (
    next_guestlist_status,
    spots_remaining,
    summarize,
    total_guests,
)


@dataclass
class FakeBooking:
    couples: int = 0
    ladies: int = 0
    stags: int = 0


@dataclass
class FakeEvent:
    guestlist_limit: int | None = None
    closing_threshold: int | None = None
    guestlist_status: str = "open"


class GuestlistMathTests(unittest.TestCase):
    def test_example_event_totals(self):
        event = FakeEvent(guestlist_limit=50)
        bookings = [FakeBooking(couples=10, ladies=5), FakeBooking(couples=2, stags=3)]

        summary = summarize(event, bookings)

        self.assertEqual(summary.total_guests, 32)
        self.assertEqual(summary.spots_remaining, 18)

    def test_order_of_bookings_does_not_matter(self):
        bookings = [
            FakeBooking(couples=3, ladies=1, stags=0),
            FakeBooking(couples=0, ladies=4, stags=2),
            FakeBooking(couples=1, ladies=0, stags=7),
        ]
        expected = (3 * 2 + 1) + (4 + 2) + (1 * 2 + 7)
        for perm in itertools.permutations(bookings):
            self.assertEqual(total_guests(perm), expected)

    def test_no_bookings(self):
        summary = summarize(FakeEvent(guestlist_limit=40), [])
        self.assertEqual(summary.total_guests, 0)
        self.assertEqual(summary.spots_remaining, 40)

    def test_no_limit_means_unknown_spots(self):
        summary = summarize(FakeEvent(), [FakeBooking(ladies=3)])
        self.assertEqual(summary.total_guests, 3)
        self.assertIsNone(summary.spots_remaining)

    def test_overbooked_is_not_clamped(self):
        self.assertEqual(spots_remaining(10, 14), -4)

    def test_status_moves_to_closing_then_closed(self):
        event = FakeEvent(guestlist_limit=20, closing_threshold=5)
        self.assertEqual(next_guestlist_status(event, 10), "open")
        self.assertEqual(next_guestlist_status(event, 15), "closing")
        self.assertEqual(next_guestlist_status(event, 20), "closed")

    def test_status_untouched_without_threshold(self):
        event = FakeEvent(guestlist_limit=20)
        self.assertEqual(next_guestlist_status(event, 25), "open")

    def test_closing_only_from_open(self):
        event = FakeEvent(guestlist_limit=20, closing_threshold=5, guestlist_status="closed")
        self.assertEqual(next_guestlist_status(event, 16), "closed")


if __name__ == "__main__":
    unittest.main()
