import pytest
from django.urls import reverse

from availability.models import BlockedPeriod
from rewards.models import UserRewards

pytestmark = pytest.mark.django_db


class TestPriceQuoteView:
    @property
    def url(self):
        return reverse("price-quote")

    def payload(self, listing, check_in, check_out, **extra):
        return {
            "property_id": listing.id,
            "check_in_date": check_in.isoformat(),
            "check_out_date": check_out.isoformat(),
            **extra,
        }

    def test_anonymous_quote(self, api_client, listing, make_night, day):
        make_night(day(0), rate=10000, discount=25)
        make_night(day(1), rate=10000)

        response = api_client.post(self.url, self.payload(listing, day(0), day(2)), format="json")

        assert response.status_code == 200
        assert response.data["grand_total"] == 20380
        assert response.data["discount_percent"] == 13
        assert response.data["credit_applied"] == 0

    def test_applies_server_side_credit(self, guest, guest_client, listing, make_night, day):
        UserRewards.objects.create(user=guest, credit_balance=5000)
        make_night(day(0), rate=10000, discount=25)
        make_night(day(1), rate=10000)

        response = guest_client.post(
            self.url, self.payload(listing, day(0), day(2), apply_credit=True), format="json"
        )

        assert response.status_code == 200
        assert response.data["credit_applied"] == 5000
        assert response.data["grand_total"] == 15293

    def test_client_credit_balance_is_not_trusted(self, api_client, listing, make_night, day):
        make_night(day(0))

        response = api_client.post(
            self.url,
            self.payload(listing, day(0), day(1), apply_credit=True, user_credit_balance=999999),
            format="json",
        )

        assert response.status_code == 200
        assert response.data["credit_applied"] == 0

    def test_invalid_range(self, api_client, listing, make_night, day):
        make_night(day(0))

        response = api_client.post(self.url, self.payload(listing, day(0), day(0)), format="json")

        assert response.status_code == 400
        assert response.data["success"] is False

    def test_blocked_night_matches_booking_outcome(self, api_client, guest_client, host, listing, make_night, day):
        make_night(day(0))
        BlockedPeriod.objects.create(property=listing, start_date=day(0), end_date=day(1), created_by=host)

        quote = api_client.post(self.url, self.payload(listing, day(0), day(1)), format="json")
        booking = guest_client.post(
            reverse("booking-list"),
            {
                "property": listing.id,
                "check_in_date": day(0).isoformat(),
                "check_out_date": day(1).isoformat(),
                "guest_first_name": "Sam",
                "guest_last_name": "Lee",
                "guest_email": "sam@example.com",
            },
            format="json",
        )

        assert quote.status_code == 400
        assert quote.data["success"] is False
        assert booking.status_code == 400

    def test_missing_availability(self, api_client, listing, day):
        response = api_client.post(self.url, self.payload(listing, day(0), day(1)), format="json")

        assert response.status_code == 404

    def test_schema_validation(self, api_client):
        response = api_client.post(self.url, {"property_id": "abc"}, format="json")

        assert response.status_code == 400
        assert "property_id" in response.data
        assert "check_in_date" in response.data


class TestGapNightRangesView:
    def url(self, listing):
        return reverse("gap-night-ranges", kwargs={"property_id": listing.id})

    def test_lists_windows(self, api_client, listing, make_night, day):
        for offset in range(5):
            make_night(day(offset), rate=10000, discount=20)
        # Not a gap night, never part of a window
        make_night(day(5), rate=10000)

        response = api_client.get(self.url(listing), {"nights": 2})

        assert response.status_code == 200
        assert len(response.data) == 4
        first = response.data[0]
        assert first["start_date"] == day(0).isoformat()
        assert first["end_date"] == day(2).isoformat()
        assert first["total_rate"] == 16000
        assert first["original_total"] == 20000
        assert len(first["dates"]) == 2
        assert first["estimate"]["total"] == 16000 + 2000 + 500
        assert first["estimate"]["is_estimate"] is True

    def test_skips_unavailable_gap_nights(self, api_client, listing, make_night, day):
        make_night(day(0), discount=20)
        make_night(day(1), discount=20, available=False)
        make_night(day(2), discount=20)

        response = api_client.get(self.url(listing), {"nights": 2})

        assert response.status_code == 200
        assert response.data == []

    def test_skips_blocked_gap_nights(self, api_client, host, listing, make_night, day):
        for offset in range(3):
            make_night(day(offset), discount=20)
        BlockedPeriod.objects.create(property=listing, start_date=day(1), end_date=day(2), created_by=host)

        response = api_client.get(self.url(listing), {"nights": 1})

        assert [r["start_date"] for r in response.data] == [day(0).isoformat(), day(2).isoformat()]
        assert api_client.get(self.url(listing), {"nights": 2}).data == []

    def test_defaults_to_single_nights(self, api_client, listing, make_night, day):
        make_night(day(0), discount=20)
        make_night(day(3), discount=20)

        response = api_client.get(self.url(listing))

        assert len(response.data) == 2

    def test_rejects_unsupported_night_count(self, api_client, listing):
        response = api_client.get(self.url(listing), {"nights": 4})

        assert response.status_code == 400

    def test_unknown_property(self, api_client, db):
        response = api_client.get(reverse("gap-night-ranges", kwargs={"property_id": 424242}))

        assert response.status_code == 404
