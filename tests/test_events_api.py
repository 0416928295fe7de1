import unittest
import uuid
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from app.models.booking import Booking
from tests.support import ApiTestCase


class EventApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.club = self.create_club()

    def add_booking(self, event_id: str, couples=0, ladies=0, stags=0):
        user = self.create_user()
        with Session(self.engine) as session:
            session.add(
                Booking(
                    event_id=uuid.UUID(event_id),
                    user_id=user.id,
                    couples=couples,
                    ladies=ladies,
                    stags=stags,
                )
            )
            session.commit()

    def test_create_copies_club_name(self):
        event = self.create_event(self.club["id"])
        self.assertEqual(event["club"], "Kitty Su")
        self.assertEqual(event["club_ref"]["id"], self.club["id"])
        self.assertEqual(event["guestlist_status"], "open")
        self.assertEqual(event["price_label"], "Free Entry")
        self.assertEqual(event["total_guests"], 0)
        self.assertIsNone(event["spots_remaining"])

    def test_create_for_unknown_club_is_404(self):
        response = self.client.post(
            "/api/events",
            json=self.event_payload(str(uuid.uuid4())),
            headers=self.admin_headers(),
        )
        self.assertEqual(response.status_code, 404)

    def test_create_rejects_client_supplied_club_name(self):
        payload = self.event_payload(self.club["id"], club="Somewhere Else")
        response = self.client.post("/api/events", json=payload, headers=self.admin_headers())
        self.assertEqual(response.status_code, 400)

    def test_create_validation(self):
        payload = self.event_payload(
            self.club["id"],
            description="short",
            price=-1,
            guestlist_status="full",
            guestlist_limit=0,
            gallery=["https://ok.example.com/a.jpg", "bad"],
        )
        response = self.client.post("/api/events", json=payload, headers=self.admin_headers())
        self.assertEqual(response.status_code, 400)
        fields = {err["loc"][1] for err in response.json()["detail"]}
        self.assertEqual(
            fields,
            {"description", "price", "guestlist_status", "guestlist_limit", "gallery"},
        )

    def test_listing_annotates_guestlist(self):
        event = self.create_event(self.club["id"], guestlist_limit=50)
        self.add_booking(event["id"], couples=10, ladies=5)
        self.add_booking(event["id"], couples=2, stags=3)

        listed = self.client.get("/api/events").json()
        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0]["total_guests"], 32)
        self.assertEqual(listed[0]["spots_remaining"], 18)
        self.assertEqual(listed[0]["booking_count"], 2)

    def test_overbooked_event_reports_negative_spots(self):
        event = self.create_event(self.club["id"], guestlist_limit=5)
        self.add_booking(event["id"], couples=4)
        fetched = self.client.get(f"/api/events/{event['id']}").json()
        self.assertEqual(fetched["spots_remaining"], -3)

    def test_genre_filter_is_case_insensitive(self):
        self.create_event(self.club["id"], title="House Party", genre="house")
        self.create_event(self.club["id"], title="Warehouse", genre="Techno")

        titles = [e["title"] for e in self.client.get("/api/events?genre=House").json()]
        self.assertEqual(titles, ["House Party"])

        everything = self.client.get("/api/events?genre=all").json()
        self.assertEqual(len(everything), 2)

    def test_upcoming_includes_today(self):
        now = datetime.now()
        today_late = now.replace(hour=23, minute=0, second=0, microsecond=0)
        yesterday = (now - timedelta(days=1)).replace(microsecond=0)
        self.create_event(self.club["id"], title="Tonight", date=today_late.isoformat())
        self.create_event(self.club["id"], title="Yesterday", date=yesterday.isoformat())

        titles = [e["title"] for e in self.client.get("/api/events?upcoming=true").json()]
        self.assertEqual(titles, ["Tonight"])

    def test_aware_date_is_stored_as_local_time(self):
        aware = datetime(2030, 1, 5, 20, 0, tzinfo=timezone.utc)
        event = self.create_event(self.club["id"], date=aware.isoformat())
        expected = aware.astimezone().replace(tzinfo=None)
        self.assertEqual(datetime.fromisoformat(event["date"]), expected)

        listed = self.client.get("/api/events?upcoming=true")
        self.assertEqual(listed.status_code, 200, listed.text)
        self.assertEqual([e["id"] for e in listed.json()], [event["id"]])

    def test_filters_compose(self):
        self.create_event(self.club["id"], title="Featured House", genre="house", featured=True)
        self.create_event(self.club["id"], title="Plain House", genre="house")
        self.create_event(self.club["id"], title="Featured Techno", genre="techno", featured=True)

        response = self.client.get("/api/events?genre=HOUSE&featured=true&upcoming=true")
        self.assertEqual([e["title"] for e in response.json()], ["Featured House"])

    def test_events_are_ordered_by_date(self):
        later = (datetime.now() + timedelta(days=10)).replace(microsecond=0).isoformat()
        sooner = (datetime.now() + timedelta(days=1)).replace(microsecond=0).isoformat()
        self.create_event(self.club["id"], title="Later", date=later)
        self.create_event(self.club["id"], title="Sooner", date=sooner)
        titles = [e["title"] for e in self.client.get("/api/events").json()]
        self.assertEqual(titles, ["Sooner", "Later"])

    def test_get_missing_event_is_404(self):
        response = self.client.get(f"/api/events/{uuid.uuid4()}")
        self.assertEqual(response.status_code, 404)

    def test_partial_update(self):
        event = self.create_event(self.club["id"], video_url="https://media.example.test/v.mp4")
        response = self.client.put(
            f"/api/events/{event['id']}",
            json={"featured": True, "video_url": ""},
            headers=self.admin_headers(),
        )
        self.assertEqual(response.status_code, 200, response.text)
        updated = response.json()
        self.assertTrue(updated["featured"])
        self.assertIsNone(updated["video_url"])
        self.assertEqual(updated["title"], event["title"])

    def test_moving_event_to_other_club_updates_name(self):
        event = self.create_event(self.club["id"])
        other = self.create_club(name="Summer House Cafe")
        response = self.client.put(
            f"/api/events/{event['id']}",
            json={"club_id": other["id"]},
            headers=self.admin_headers(),
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["club"], "Summer House Cafe")

    def test_update_missing_event_is_404(self):
        response = self.client.put(
            f"/api/events/{uuid.uuid4()}", json={"featured": True}, headers=self.admin_headers()
        )
        self.assertEqual(response.status_code, 404)

    def test_update_requires_admin(self):
        event = self.create_event(self.club["id"])
        user = self.create_user()
        response = self.client.put(
            f"/api/events/{event['id']}",
            json={"featured": True},
            headers=self.auth_headers(user.id),
        )
        self.assertEqual(response.status_code, 403)

    def test_delete(self):
        event = self.create_event(self.club["id"])
        self.add_booking(event["id"], ladies=2)
        headers = self.admin_headers()

        response = self.client.delete(f"/api/events/{event['id']}", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(f"/api/events/{event['id']}").status_code, 404)

        again = self.client.delete(f"/api/events/{event['id']}", headers=headers)
        self.assertEqual(again.status_code, 404)


if __name__ == "__main__":
    unittest.main()
