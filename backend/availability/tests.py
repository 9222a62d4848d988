from datetime import date, timedelta

import pytest
from django.contrib.auth.models import User
from django.urls import reverse
from django.utils import timezone

from availability.models import PropertyAvailability, BlockedPeriod
from availability.serializers import WEEKDAY_MAP
from availability.utils import detect_gap_nights, get_dates_in_range
from bookings.models import Booking


class TestDateHelpers:
    def test_dates_in_range_excludes_end(self):
        nights = get_dates_in_range(date(2026, 3, 1), date(2026, 3, 4))
        assert nights == [date(2026, 3, 1), date(2026, 3, 2), date(2026, 3, 3)]

    def test_empty_range(self):
        assert get_dates_in_range(date(2026, 3, 1), date(2026, 3, 1)) == []


class TestDetectGapNights:
    def test_one_and_two_night_holes(self):
        blocked = [
            (date(2026, 3, 10), date(2026, 3, 12)),
            (date(2026, 3, 1), date(2026, 3, 5)),
            (date(2026, 3, 6), date(2026, 3, 8)),
        ]
        gaps = detect_gap_nights(blocked)

        assert gaps == [
            {"date": date(2026, 3, 5), "gap_size": 1},
            {"date": date(2026, 3, 8), "gap_size": 2},
            {"date": date(2026, 3, 9), "gap_size": 2},
        ]

    def test_ignores_wide_holes_and_back_to_back(self):
        blocked = [
            (date(2026, 3, 1), date(2026, 3, 3)),
            (date(2026, 3, 3), date(2026, 3, 5)),
            (date(2026, 3, 10), date(2026, 3, 12)),
        ]
        assert detect_gap_nights(blocked) == []

    def test_needs_two_ranges(self):
        assert detect_gap_nights([(date(2026, 3, 1), date(2026, 3, 3))]) == []
        assert detect_gap_nights([]) == []


@pytest.mark.django_db
class TestPropertyAvailabilityModel:
    def test_bookable_excludes_blocked_and_unavailable(self, listing, host, make_night, day):
        for offset in range(4):
            make_night(day(offset), available=offset != 3)
        BlockedPeriod.objects.create(property=listing, start_date=day(1), end_date=day(2), created_by=host)

        bookable = PropertyAvailability.objects.bookable().filter(property=listing)

        assert [r.date for r in bookable.order_by("date")] == [day(0), day(2)]

    def test_discount_cleared_on_regular_nights(self, listing, day):
        record = PropertyAvailability.objects.create(
            property=listing, date=day(0), nightly_rate=10000, is_gap_night=False, gap_night_discount=40
        )
        record.refresh_from_db()
        assert record.gap_night_discount == 0


@pytest.mark.django_db
class TestBulkAvailability:
    def url(self, listing):
        return reverse("property-availability", kwargs={"property_id": listing.id})

    def test_creates_with_property_defaults(self, host_client, listing, day):
        response = host_client.post(
            self.url(listing),
            {"dates": [
                {"date": day(0).isoformat(), "is_gap_night": True, "gap_night_discount": 25},
                {"date": day(1).isoformat()},
            ]},
            format="json",
        )

        assert response.status_code == 200
        first, second = PropertyAvailability.objects.filter(property=listing).order_by("date")
        assert first.is_gap_night and first.gap_night_discount == 25
        assert first.nightly_rate == listing.base_nightly_rate
        assert second.is_available and not second.is_gap_night

    def test_updates_only_sent_fields(self, host_client, listing, make_night, day):
        record = make_night(day(0), rate=15000, discount=30)

        response = host_client.post(
            self.url(listing),
            {"dates": [{"date": day(0).isoformat(), "is_available": False}]},
            format="json",
        )

        assert response.status_code == 200
        record.refresh_from_db()
        assert record.is_available is False
        assert record.nightly_rate == 15000
        assert record.gap_night_discount == 30

    def test_explicit_zero_values_kept(self, host_client, listing, day):
        response = host_client.post(
            self.url(listing),
            {"dates": [{"date": day(0).isoformat(), "nightly_rate": 0, "is_gap_night": True, "gap_night_discount": 0}]},
            format="json",
        )

        assert response.status_code == 200
        record = PropertyAvailability.objects.get(property=listing, date=day(0))
        assert record.nightly_rate == 0
        assert record.gap_night_discount == 0

    def test_cannot_reopen_booked_night(self, host_client, listing, guest, make_night, day):
        make_night(day(0), available=False)
        make_night(day(1))
        Booking.objects.create(
            property=listing, host=listing.host, user=guest,
            check_in_date=day(0), check_out_date=day(1),
            guest_first_name="Sam", guest_last_name="Lee", guest_email="sam@example.com",
        )

        response = host_client.post(
            self.url(listing),
            {"dates": [
                {"date": day(0).isoformat(), "is_available": True},
                {"date": day(1).isoformat(), "is_available": True},
            ]},
            format="json",
        )

        assert response.status_code == 400
        assert not PropertyAvailability.objects.get(property=listing, date=day(0)).is_available

    def test_can_reopen_after_cancellation(self, host_client, listing, guest, make_night, day):
        make_night(day(0), available=False)
        Booking.objects.create(
            property=listing, host=listing.host, user=guest,
            check_in_date=day(0), check_out_date=day(1), status=Booking.Status.CANCELLED,
            guest_first_name="Sam", guest_last_name="Lee", guest_email="sam@example.com",
        )

        response = host_client.post(
            self.url(listing), {"dates": [{"date": day(0).isoformat(), "is_available": True}]}, format="json"
        )

        assert response.status_code == 200
        assert PropertyAvailability.objects.get(property=listing, date=day(0)).is_available

    def test_booked_night_can_still_be_repriced(self, host_client, listing, guest, make_night, day):
        make_night(day(0), available=False)
        Booking.objects.create(
            property=listing, host=listing.host, user=guest,
            check_in_date=day(0), check_out_date=day(1),
            guest_first_name="Sam", guest_last_name="Lee", guest_email="sam@example.com",
        )

        response = host_client.post(
            self.url(listing), {"dates": [{"date": day(0).isoformat(), "nightly_rate": 12000}]}, format="json"
        )

        assert response.status_code == 200

    def test_rejects_past_dates(self, host_client, listing):
        yesterday = timezone.localdate() - timedelta(days=1)
        response = host_client.post(
            self.url(listing), {"dates": [{"date": yesterday.isoformat()}]}, format="json"
        )
        assert response.status_code == 400

    def test_rejects_bad_date_format(self, host_client, listing):
        response = host_client.post(self.url(listing), {"dates": [{"date": "03/01/2026"}]}, format="json")
        assert response.status_code == 400

    def test_rejects_empty(self, host_client, listing):
        response = host_client.post(self.url(listing), {"dates": []}, format="json")
        assert response.status_code == 400

    def test_other_hosts_cannot_edit(self, listing, guest_client, day):
        response = guest_client.post(
            self.url(listing), {"dates": [{"date": day(0).isoformat()}]}, format="json"
        )
        assert response.status_code == 404

    def test_list_filters_by_range(self, host_client, listing, make_night, day):
        for offset in range(4):
            make_night(day(offset))

        response = host_client.get(
            self.url(listing), {"start_date": day(1).isoformat(), "end_date": day(2).isoformat()}
        )

        assert response.status_code == 200
        assert [r["date"] for r in response.data] == [day(1).isoformat(), day(2).isoformat()]


@pytest.mark.django_db
class TestRangeUpdate:
    def test_flags_weekdays_in_range(self, host_client, listing, day):
        start, end = day(0), day(13)
        response = host_client.post(
            reverse("availability-range-update", kwargs={"property_id": listing.id}),
            {
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "weekdays": ["Tuesday"],
                "is_gap_night": True,
                "gap_night_discount": 20,
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data["updated_count"] == 2
        records = PropertyAvailability.objects.filter(property=listing)
        assert all(r.date.weekday() == 1 and r.is_gap_night for r in records)

    def test_cannot_reopen_booked_range(self, host_client, listing, guest, day):
        Booking.objects.create(
            property=listing, host=listing.host, user=guest,
            check_in_date=day(2), check_out_date=day(4),
            guest_first_name="Sam", guest_last_name="Lee", guest_email="sam@example.com",
        )

        response = host_client.post(
            reverse("availability-range-update", kwargs={"property_id": listing.id}),
            {"start_date": day(0).isoformat(), "end_date": day(6).isoformat(), "is_available": True},
            format="json",
        )

        assert response.status_code == 400
        assert not PropertyAvailability.objects.filter(property=listing).exists()

    def test_weekdays_outside_booking_can_reopen(self, host_client, listing, guest, day):
        Booking.objects.create(
            property=listing, host=listing.host, user=guest,
            check_in_date=day(2), check_out_date=day(3),
            guest_first_name="Sam", guest_last_name="Lee", guest_email="sam@example.com",
        )
        other_weekday = next(
            name for name, number in WEEKDAY_MAP.items() if number != day(2).weekday()
        )

        response = host_client.post(
            reverse("availability-range-update", kwargs={"property_id": listing.id}),
            {
                "start_date": day(0).isoformat(),
                "end_date": day(6).isoformat(),
                "weekdays": [other_weekday],
                "is_available": True,
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data["updated_count"] == 1

    def test_rejects_reversed_range(self, host_client, listing, day):
        response = host_client.post(
            reverse("availability-range-update", kwargs={"property_id": listing.id}),
            {"start_date": day(3).isoformat(), "end_date": day(1).isoformat()},
            format="json",
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestBlockedPeriods:
    def test_create_and_overlap(self, host_client, listing, day):
        url = reverse("blocked-period-create")
        payload = {"property": listing.id, "start_date": day(0).isoformat(), "end_date": day(3).isoformat()}

        assert host_client.post(url, payload, format="json").status_code == 201
        overlapping = {**payload, "start_date": day(2).isoformat(), "end_date": day(5).isoformat()}
        assert host_client.post(url, overlapping, format="json").status_code == 400

    def test_cannot_block_booked_dates(self, host_client, listing, guest, day):
        Booking.objects.create(
            property=listing, host=listing.host, user=guest,
            check_in_date=day(1), check_out_date=day(3),
            guest_first_name="Sam", guest_last_name="Lee", guest_email="sam@example.com",
        )
        response = host_client.post(
            reverse("blocked-period-create"),
            {"property": listing.id, "start_date": day(0).isoformat(), "end_date": day(2).isoformat()},
            format="json",
        )
        assert response.status_code == 400

    def test_cannot_block_someone_elses_property(self, listing, day):
        from rest_framework.test import APIClient

        other = User.objects.create_user(username="other", password="pass12345")
        client = APIClient()
        client.force_authenticate(user=other)
        response = client.post(
            reverse("blocked-period-create"),
            {"property": listing.id, "start_date": day(0).isoformat(), "end_date": day(2).isoformat()},
            format="json",
        )
        assert response.status_code == 400

    def test_list_only_own(self, host_client, listing, host, day):
        BlockedPeriod.objects.create(property=listing, start_date=day(0), end_date=day(1), created_by=host)
        response = host_client.get(reverse("blocked-period-list"))
        assert response.status_code == 200
        assert len(response.data) == 1


@pytest.mark.django_db
class TestGapNightDetection:
    def url(self, listing):
        return reverse("detect-gap-nights", kwargs={"property_id": listing.id})

    def test_detect_and_apply(self, host_client, listing, host, guest, make_night, day):
        BlockedPeriod.objects.create(property=listing, start_date=day(0), end_date=day(2), created_by=host)
        Booking.objects.create(
            property=listing, host=host, user=guest,
            check_in_date=day(3), check_out_date=day(5),
            guest_first_name="Sam", guest_last_name="Lee", guest_email="sam@example.com",
        )
        make_night(day(2), rate=11000)

        response = host_client.post(self.url(listing), {"apply": True, "gap_night_discount": 35}, format="json")

        assert response.status_code == 200
        assert response.data["detected_gap_nights"] == [{"date": day(2).isoformat(), "gap_size": 1}]
        assert response.data["flagged_count"] == 1
        record = PropertyAvailability.objects.get(property=listing, date=day(2))
        assert record.is_gap_night and record.gap_night_discount == 35
        assert record.nightly_rate == 11000

    def test_detect_only(self, host_client, listing, host, day):
        BlockedPeriod.objects.create(property=listing, start_date=day(0), end_date=day(2), created_by=host)
        BlockedPeriod.objects.create(property=listing, start_date=day(4), end_date=day(6), created_by=host)

        response = host_client.post(self.url(listing), {}, format="json")

        assert response.status_code == 200
        assert len(response.data["detected_gap_nights"]) == 2
        assert response.data["flagged_count"] == 0
        assert not PropertyAvailability.objects.filter(property=listing).exists()

    def test_cancelled_bookings_do_not_block(self, host_client, listing, host, guest, day):
        BlockedPeriod.objects.create(property=listing, start_date=day(0), end_date=day(2), created_by=host)
        Booking.objects.create(
            property=listing, host=host, user=guest,
            check_in_date=day(3), check_out_date=day(5), status=Booking.Status.CANCELLED,
            guest_first_name="Sam", guest_last_name="Lee", guest_email="sam@example.com",
        )

        response = host_client.post(self.url(listing), {}, format="json")

        assert response.data["detected_gap_nights"] == []
